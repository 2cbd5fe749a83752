import argparse

import pytest

from orientcrop.main import _parse_rect, _parse_size, build_parser, main
from orientcrop.models.geometry import Rect, Size
from orientcrop.models.orientation import Orientation
from orientcrop.services.image_service import ImageService


class TestCommands:
    def test_info_reports_raw_tiff_size(self, tmp_path, make_buffer, capsys):
        source = ImageService().save_image(make_buffer(30, 20), tmp_path / "tagged.tiff", Orientation.RIGHT)
        assert main(["info", str(source)]) == 0
        out = capsys.readouterr().out
        assert "size: 30x20" in out
        assert "orientation: 6 (Right)" in out

    def test_info(self, write_tagged_image, capsys):
        source = write_tagged_image(30, 20, Orientation.LEFT)
        assert main(["info", str(source)]) == 0
        out = capsys.readouterr().out
        assert "size: 30x20" in out
        assert "display size: 20x30" in out
        assert "orientation: 8 (Left)" in out

    def test_crop(self, write_tagged_image, tmp_path):
        source = write_tagged_image(30, 20, Orientation.RIGHT)
        output = tmp_path / "crop.png"
        assert main(["crop", str(source), str(output), "--rect", "2,3,5,4"]) == 0
        assert ImageService().load_image(output).size == Size(5, 4)

    def test_orient(self, write_tagged_image, tmp_path):
        source = write_tagged_image(30, 20, Orientation.DOWN)
        output = tmp_path / "upright.tiff"
        assert main(["orient", str(source), str(output)]) == 0
        assert ImageService().load_image(output).orientation is Orientation.UP

    def test_generate(self, write_tagged_image, tmp_path, capsys):
        source = write_tagged_image(16, 12)
        destination = tmp_path / "gen"
        destination.mkdir()
        args = ["generate", str(source), str(destination), "--format", "png", "--no-labels", "--max-size", "8x8"]
        assert main(args) == 0
        assert len(capsys.readouterr().out.splitlines()) == 8
        assert ImageService().load_image(destination / "sample_7.png").size == Size(6, 8)

    def test_failure_returns_one(self, tmp_path):
        assert main(["info", str(tmp_path / "missing.png")]) == 1

    def test_crop_outside_image(self, write_tagged_image, tmp_path):
        source = write_tagged_image(10, 10)
        assert main(["crop", str(source), str(tmp_path / "o.png"), "--rect", "50,50,5,5"]) == 1


class TestParsing:
    def test_rect(self):
        assert _parse_rect("1,2.5,3,4") == Rect(1, 2.5, 3, 4)

    @pytest.mark.parametrize("value", ["1,2,3", "a,b,c,d", "1,2,-3,4"])
    def test_rect_invalid(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            _parse_rect(value)

    def test_size(self):
        assert _parse_size("640X480") == Size(640, 480)

    def test_log_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("ORIENTCROP_LOG_LEVEL", "debug")
        assert build_parser().parse_args(["info", "x.png"]).log_level == "DEBUG"

    def test_rejects_bad_quality(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["orient", "a.png", "b.png", "--quality", "2"])
