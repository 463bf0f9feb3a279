from .image_service import ImageService
from .transform_service import TransformService
from .trim_service import TrimBounds, TrimService

__all__ = ["ImageService", "TransformService", "TrimBounds", "TrimService"]
