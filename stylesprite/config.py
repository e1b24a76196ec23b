import os.path
from dataclasses import dataclass, field
from typing import Optional

from .errors import ConfigurationError

OUTPUT_FORMATS = ("png", "jpeg", "jpg", "gif")


@dataclass
class SpriteConfig:
    """Options fixed for the lifetime of one sprite sheet."""

    image_root: str = ""
    output_file: str = "sprite.png"
    placeholder: str = "SPRITE_PLACEHOLDER"
    pngcrush: Optional[str] = None
    jpeg_quality: int = 80
    output_format: str = field(init=False)

    def __post_init__(self):
        ext = os.path.splitext(self.output_file)[1]
        self.output_format = ext[1:].lower()
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigurationError(f"Invalid output format '{self.output_format}'")
        if self.output_format != "png":
            self.pngcrush = None
        if not self.placeholder:
            raise ConfigurationError("Placeholder prefix can not be empty")
