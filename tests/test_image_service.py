import pytest
from PIL import Image

from collage.errors import ImageLoadError, ImageSaveError
from collage.services.image_service import ImageService
from helpers import png_header, solid

service = ImageService()


def test_load_image_converts_to_rgba(tmp_path):
    path = tmp_path / "pic.jpg"
    solid(12, 7, (0, 128, 0, 255)).convert("RGB").save(path)
    data = service.load_image(path)
    assert data.pil_image.mode == "RGBA"
    assert data.mode == "RGB"
    assert (data.width, data.height) == (12, 7)
    assert data.size_bytes == path.stat().st_size
    assert data.name == "pic.jpg"


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        service.load_image(tmp_path / "nope.png")


def test_load_non_image_is_tagged_with_path(tmp_path):
    path = tmp_path / "fake.png"
    path.write_bytes(b"definitely not a png")
    with pytest.raises(ImageLoadError) as info:
        service.load_image(path)
    assert info.value.path == path
    assert "fake.png" in str(info.value)


def test_load_oversized_header_is_rejected_before_decoding(tmp_path):
    path = tmp_path / "huge.png"
    png_header(path, 20000, 10000)
    with pytest.raises(ImageLoadError) as info:
        service.load_image(path)
    assert info.value.path == path
    assert isinstance(info.value.__cause__, Image.DecompressionBombError)


def test_collect_paths_sorts_directory_by_name(image_dir):
    paths = service.collect_paths([image_dir])
    assert [p.name for p in paths] == ["a.jpg", "b.png", "c.png"]


def test_collect_paths_keeps_explicit_order(image_dir):
    explicit = [image_dir / "c.png", image_dir / "a.jpg"]
    assert service.collect_paths(explicit) == explicit


def test_load_images_mixes_files_and_directories(image_dir, tmp_path):
    extra = tmp_path / "z.png"
    solid(5, 5).save(extra)
    images = service.load_images([extra, image_dir])
    assert [img.name for img in images] == ["z.png", "a.jpg", "b.png", "c.png"]


def test_save_png_roundtrip(tmp_path):
    image = solid(4, 3, (1, 2, 3, 128))
    out = service.save_image(image, tmp_path / "nested" / "out.png")
    assert out.exists()
    with Image.open(out) as saved:
        assert saved.mode == "RGBA"
        assert saved.getpixel((0, 0)) == (1, 2, 3, 128)


def test_save_jpeg_flattens_alpha(tmp_path):
    out = service.save_image(solid(8, 8, (0, 0, 0, 0)), tmp_path / "out.jpg")
    with Image.open(out) as saved:
        assert saved.mode == "RGB"
        r, g, b = saved.getpixel((4, 4))
        assert min(r, g, b) > 245  # transparent -> white


def test_save_unknown_format(tmp_path):
    with pytest.raises(ImageSaveError) as info:
        service.save_image(solid(2, 2), tmp_path / "out.unknownext")
    assert info.value.path.name == "out.unknownext"


def test_default_output_path_counts_up(tmp_path):
    first = service.default_output_path(tmp_path)
    assert first == tmp_path / "collage_0.png"
    first.write_bytes(b"")
    assert service.default_output_path(tmp_path) == tmp_path / "collage_1.png"
