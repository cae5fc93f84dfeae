import logging

import pytest
from PIL import Image

from collage import cli
from collage.models.layout_model import Color, Orientation
from helpers import png_header, solid


def _close(pixel, expected, tol=8):
    return all(abs(c - e) <= tol for c, e in zip(pixel[:3], expected))


def test_parser_defaults():
    args = cli.build_parser().parse_args(["a.png"])
    config = cli.config_from_args(args)
    assert config.width is None and config.height is None
    assert config.orientation is Orientation.PORTRAIT
    assert (config.top_margin, config.left_margin, config.spacing) == (0, 0, 20)
    assert config.background == Color(255, 255, 255)
    assert config.preserve_aspect is False
    assert args.out is None


def test_parser_short_options():
    args = cli.build_parser().parse_args(
        ["-w", "100", "-h", "50", "-o", "landscape", "-t", "3", "-l", "4", "-s", "0", "-c", "#000000", "-p", "x.png"]
    )
    config = cli.config_from_args(args)
    assert (config.width, config.height) == (100, 50)
    assert config.orientation is Orientation.LANDSCAPE
    assert (config.top_margin, config.left_margin, config.spacing) == (3, 4, 0)
    assert config.background == Color(0, 0, 0)
    assert config.preserve_aspect is True


@pytest.mark.parametrize("argv", [["-w", "0"], ["-s", "-1"], ["-o", "diagonal"], ["-j", "0"]])
def test_parser_rejects_bad_values(argv):
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(argv)


def test_main_builds_collage_from_directory(image_dir, tmp_path, capsys):
    out = tmp_path / "result.png"
    code = cli.main([str(image_dir), "-s", "5", "-t", "2", "-l", "1", "--out", str(out), "-q"])
    assert code == 0
    assert capsys.readouterr().out.strip() == str(out)
    with Image.open(out) as result:
        # 3 images of 30x20, portrait -> 2x2 grid with one slack cell
        assert result.size == (1 * 2 + 2 * 30 + 5, 2 * 2 + 2 * 20 + 5)
        assert _close(result.getpixel((1, 2)), (0, 255, 0))  # a.jpg, lossy
        assert result.getpixel((1 + 30 + 5, 2))[:3] == (255, 0, 0)
        assert result.getpixel((1 + 30 + 5 + 10, 2 + 20 + 5 + 10))[:3] == (255, 255, 255)


def test_main_empty_input_fails(tmp_path, caplog):
    empty = tmp_path / "empty"
    empty.mkdir()
    with caplog.at_level(logging.ERROR):
        code = cli.main([str(empty), "--out", str(tmp_path / "x.png")])
    assert code == 1
    assert not (tmp_path / "x.png").exists()


def test_main_missing_file_fails(tmp_path):
    assert cli.main([str(tmp_path / "missing.png"), "--out", str(tmp_path / "x.png"), "-q"]) == 1


def test_main_oversized_image_fails(tmp_path):
    png_header(tmp_path / "huge.png", 20000, 10000)
    assert cli.main([str(tmp_path / "huge.png"), "--out", str(tmp_path / "x.png"), "-q"]) == 1
    assert not (tmp_path / "x.png").exists()


def test_main_bad_color_fails(tmp_path):
    path = tmp_path / "one.png"
    solid(4, 4).save(path)
    assert cli.main([str(path), "-c", "blue", "--out", str(tmp_path / "x.png"), "-q"]) == 1


def test_main_is_idempotent(image_dir, tmp_path):
    first, second = tmp_path / "1.png", tmp_path / "2.png"
    argv = [str(image_dir), "-w", "17", "-h", "11", "-p", "-c", "#336699", "-q"]
    assert cli.main(argv + ["--out", str(first)]) == 0
    assert cli.main(argv + ["--out", str(second), "-j", "1"]) == 0
    with Image.open(first) as a, Image.open(second) as b:
        assert a.tobytes() == b.tobytes()
