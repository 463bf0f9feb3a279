import pytest

from anybitmap import ImageFormat, InvalidArgumentError, UnsupportedFormatError
from anybitmap.services.image_service import ImageService


@pytest.mark.parametrize("quality", [0, 50, 100, 75.0])
def test_accepts_quality_in_range(quality):
    assert ImageService.validate_quality(quality) == int(quality)


@pytest.mark.parametrize("quality", [-1, 101, float("nan"), "high", True])
def test_rejects_quality_out_of_range(quality):
    with pytest.raises(InvalidArgumentError):
        ImageService.validate_quality(quality)


def test_defaults_come_from_environment(monkeypatch):
    monkeypatch.setenv("ANYBITMAP_TRANSFORM_FORMAT", "webp")
    monkeypatch.setenv("ANYBITMAP_DEFAULT_QUALITY", "80")

    service = ImageService()

    assert service.transform_format is ImageFormat.WEBP
    assert service.resolve_quality(None) == 80
    assert service.resolve_format(None) is ImageFormat.WEBP
    assert service.resolve_format(".jpg") is ImageFormat.JPEG


def test_transform_format_must_be_encodable():
    with pytest.raises(InvalidArgumentError):
        ImageService(transform_format="svg")


def test_require_format_rejects_unknown_and_empty():
    service = ImageService()

    with pytest.raises(UnsupportedFormatError):
        service.require_format(b"plain text, not an image")
    with pytest.raises(InvalidArgumentError):
        service.require_format(b"")


def test_reads_and_writes_files(tmp_path, gradient_png):
    service = ImageService()

    path = service.write_file(tmp_path / "nested" / "img.png", gradient_png)

    assert service.read_file(path) == gradient_png
    with pytest.raises(FileNotFoundError):
        service.read_file(tmp_path / "missing.png")
