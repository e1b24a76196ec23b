"""
Sprite layout: every registered block is stacked below the previous one,
left to right alignment is applied inside the canvas width and repeating
blocks are tiled along their axis.

    +-Sprite------------------------------+
    | X-Block---------------------------+ |
    | | +-Img-------+ +-Img-------+     | |
    | | |           | |           |     | |
    | | +-----------+ +-----------+     | |
    | +---------------------------------+ |
    +-------------------------------------+

"X" is the position reported back to the CSS.
"""

import logging
import math
import os.path
import re

from . import imaging
from .config import SpriteConfig
from .options import Fill, Registry

logger = logging.getLogger(__name__)


def round_half_up(value):
    return int(math.floor(value + 0.5))


def margin_css(spec):
    """Forced margin and size declarations for totalwidth/totalheight."""
    if not (spec.totalwidth and spec.totalheight):
        return ""

    img_w, img_h = spec.image_width, spec.image_height
    marg_w = spec.totalwidth - img_w
    marg_h = spec.totalheight - img_h
    top, bottom = (marg_h + 1) // 2, marg_h // 2
    left, right = (marg_w + 1) // 2, marg_w // 2

    # box model: padding and borders count towards the element size
    if spec.padwidth:
        img_w += spec.padwidth
    if spec.padheight:
        img_h += spec.padheight

    return (f";margin:{top}px {right}px {bottom}px {left}px !important;"
            f"height:{img_h}px !important;"
            f"width:{img_w}px !important")


def position_css(spec, start_x, start_y):
    x = f"-{start_x}px"
    if spec.align == "right":
        x = "100%"
    elif spec.align == "center":
        x = "center"
    return f"{x} -{start_y}px{margin_css(spec)}"


class Sprite(Registry):
    """
    Collects image references and draws them into one sprite image.

    References are registered while the stylesheet is compiled (register()
    returns a placeholder token); build() then lays out the images, writes
    the sprite image and returns the stylesheet text with every placeholder
    replaced by its background position. A Sprite is not re-entrant: only one
    build may run at a time.
    """

    PADDING = 10

    def __init__(self, config=None, **kwargs):
        self.config = config or SpriteConfig(**kwargs)
        super().__init__(self.config.placeholder)
        self.canvas_width = 0
        self.canvas_height = 0
        self.canvas = None

    def build(self, css):
        self.canvas_width = 0
        self.canvas_height = 0
        for spec in self.images:
            self.process_image(spec)
        return self.make_map(css)

    def process_image(self, spec):
        logger.info("processing %s (%d)...", spec.filename, spec.id)
        path = os.path.join(self.config.image_root, spec.filename)
        img = imaging.open_image(path, lineno=spec.lineno)

        spec.image = img
        spec.image_width, spec.image_height = img.size
        if not spec.width:
            spec.width = spec.image_width
        if not spec.height:
            spec.height = spec.image_height

        if spec.repeat == "x":
            spec.block_width = spec.limit_repeat_x or Fill.CANVAS
        elif spec.align != "block":
            spec.block_width = Fill.CANVAS
        else:
            spec.block_width = spec.width

        spec.block_height = spec.limit_repeat_y if spec.repeat == "y" else spec.height
        spec.block_height = max(spec.block_height, spec.height)

        if spec.block_width is not Fill.CANVAS and spec.block_width > self.canvas_width:
            self.canvas_width = spec.block_width
        # full width blocks still need room for the image itself
        if spec.width > self.canvas_width:
            self.canvas_width = spec.width

        self.canvas_height += spec.block_height + self.PADDING

    def block_image(self, spec):
        block = imaging.create_image(spec.width, spec.height)
        if spec.resize:
            block.paste(imaging.resample(spec.image, spec.width, spec.height), (0, 0))
            return block

        pos_x = pos_y = 0
        if spec.width > spec.image_width:
            pos_x = round_half_up(spec.width / 2 - spec.image_width / 2)
        if spec.height > spec.image_height:
            if spec.valign == "top":
                pos_y = 0
            elif spec.valign == "bottom":
                pos_y = spec.height - spec.image_height
            else:
                pos_y = round_half_up(spec.height / 2 - spec.image_height / 2)

        imaging.copy_region(spec.image, block, pos_x, pos_y, 0, 0,
                            spec.image_width, spec.image_height)
        return block

    def make_map(self, css):
        self.canvas = imaging.create_image(self.canvas_width, self.canvas_height)
        cur_y = 0

        for spec in self.images:
            if spec.block_width is Fill.CANVAS:
                spec.block_width = self.canvas_width
            block = self.block_image(spec)

            if spec.align == "center":
                cur_x = round_half_up(self.canvas_width / 2 - spec.width / 2)
            elif spec.align == "right":
                cur_x = self.canvas_width - spec.width
            else:
                cur_x = 0
            start_x, start_y = cur_x, cur_y

            if spec.repeat == "no":
                imaging.copy_region(block, self.canvas, cur_x, cur_y, 0, 0,
                                    spec.width, spec.height)
                cur_y += spec.height + self.PADDING

            elif spec.repeat == "x":
                cur_x = start_x = 0
                while cur_x < spec.block_width:
                    width = min(spec.width, spec.block_width - cur_x)
                    imaging.copy_region(block, self.canvas, cur_x, cur_y, 0, 0,
                                        width, spec.height)
                    cur_x += spec.width
                cur_y += spec.height + self.PADDING

            elif spec.repeat == "y":
                end_y = start_y + spec.block_height
                while cur_y < end_y:
                    height = min(spec.height, end_y - cur_y)
                    imaging.copy_region(block, self.canvas, cur_x, cur_y, 0, 0,
                                        spec.width, height)
                    cur_y += height
                cur_y += self.PADDING

            css = self.replace(css, spec, position_css(spec, start_x, start_y))

        imaging.save_image(self.canvas, self.config.output_file,
                           self.config.output_format, quality=self.config.jpeg_quality)
        if self.config.pngcrush:
            imaging.crush(self.config.pngcrush, self.config.output_file)
        logger.info("CSS processed")
        return css

    def replace(self, css, spec, value):
        token = re.escape(self.token(spec))
        return re.sub(r"""(['"]?)%s\1""" % token, lambda m: value, css)
