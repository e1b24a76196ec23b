"""Thin wrapper over Pillow providing the drawing primitives a sprite needs."""

import logging
import os
import os.path
import shlex
import subprocess
import time

from PIL import Image, UnidentifiedImageError

from .errors import (EncodingError, ExternalToolError, ImageLoadError,
                     UnsupportedFormatError)

logger = logging.getLogger(__name__)

DECODERS = {
    "png": "PNG",
    "gif": "GIF",
    "jpg": "JPEG",
    "jpeg": "JPEG",
}

# smallest canvas that can still carry transparency
MIN_SIZE = 5
TRANSPARENT = (0, 0, 0, 0)
GIF_TRANSPARENT_INDEX = 255


def image_format(path):
    ext = os.path.splitext(path)[1][1:].lower()
    if ext not in DECODERS:
        raise UnsupportedFormatError(f"Unknown file type '{ext}' for {path}")
    return DECODERS[ext]


def open_image(path, lineno=None):
    fmt = image_format(path)
    try:
        with Image.open(path, formats=[fmt]) as img:
            return img.convert("RGBA")
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as err:
        raise ImageLoadError(f"Can not open image {path}: {err}",
                             filename=path, lineno=lineno) from err


def create_image(width, height):
    return Image.new("RGBA", (max(width, MIN_SIZE), max(height, MIN_SIZE)), TRANSPARENT)


def copy_region(src, dst, dst_x, dst_y, src_x, src_y, width, height):
    """Copy a width x height region of src onto dst, clipped to dst."""
    dst.paste(src.crop((src_x, src_y, src_x + width, src_y + height)), (dst_x, dst_y))


def resample(src, width, height):
    return src.resize((width, height))


def _to_gif(canvas):
    alpha = canvas.getchannel("A")
    image = canvas.convert("RGB").convert("P", palette=Image.Palette.ADAPTIVE,
                                          colors=GIF_TRANSPARENT_INDEX)
    mask = Image.eval(alpha, lambda a: 255 if a <= 128 else 0)
    image.paste(GIF_TRANSPARENT_INDEX, mask)
    return image


def save_image(canvas, path, fmt, quality=80):
    try:
        if fmt == "gif":
            _to_gif(canvas).save(path, "GIF", transparency=GIF_TRANSPARENT_INDEX)
        elif fmt in ("jpg", "jpeg"):
            canvas.convert("RGB").save(path, "JPEG", quality=quality)
        else:
            canvas.save(path, "PNG")
    except (OSError, ValueError) as err:
        raise EncodingError(f"Can not write sprite image {path}: {err}") from err


def crush(command, path):
    """Recompress the PNG at path in place with an external optimizer."""
    tmp_name = f"{path}_tmp{int(time.time() * 1000)}"
    try:
        os.rename(path, tmp_name)
        subprocess.run(shlex.split(command) + [tmp_name, path], check=True,
                       stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    except subprocess.CalledProcessError as err:
        raise ExternalToolError(f"{command} failed with status {err.returncode}",
                                command=command, returncode=err.returncode) from err
    except OSError as err:
        raise ExternalToolError(f"Can not run {command}: {err}", command=command) from err
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
    logger.info("PNG crushed")
