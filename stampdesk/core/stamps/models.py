from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple


class ImageFormat(Enum):
    PNG = "png"
    JPEG = "jpeg"

    @staticmethod
    def from_declared(declared: Optional[str]) -> "ImageFormat":
        """
        Resolve an image format from a MIME type, data URL prefix or file name.

        Anything unrecognised is treated as PNG.
        """
        if not declared:
            return ImageFormat.PNG
        lowered = declared.lower()
        if "jpeg" in lowered or "jpg" in lowered:
            return ImageFormat.JPEG
        return ImageFormat.PNG


@dataclass(frozen=True)
class StampKind:
    """A reusable stamp template from the catalog."""
    id: str
    label: str
    default_size: float  # display units
    image_bytes: bytes
    image_format: ImageFormat = ImageFormat.PNG
    is_builtin: bool = True

    def __repr__(self):
        return (f"StampKind(id={self.id!r}, label={self.label!r}, "
                f"default_size={self.default_size}, "
                f"format={self.image_format.value}, bytes={len(self.image_bytes)})")


@dataclass(frozen=True)
class Stamp:
    """One placed stamp instance."""
    page_number: int  # 1-based page number
    x: float  # display-space center
    y: float
    size: float  # display units, fixed at placement
    kind: StampKind

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y

    def copy(self) -> "Stamp":
        return replace(self)
