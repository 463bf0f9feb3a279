from .codec_repository import CodecRepository
from .image_repository import ImageRepository

__all__ = ["CodecRepository", "ImageRepository"]
