from .config import SpriteConfig
from .errors import (ConfigurationError, EncodingError, ExternalToolError,
                     ImageLoadError, SpriteError, UnsupportedFormatError,
                     ValidationError)
from .host import render
from .layout import Sprite
from .options import Fill, ImageBlockSpec, Reference, Registry

__version__ = "0.1.0"
