import argparse
import logging
import sys

from .errors import SpriteError
from .host import render
from .layout import Sprite

description = """
Pack the images referenced by sprite() calls in a stylesheet into one sprite
image and write the stylesheet with the calls replaced by background
positions.
"""

parser = argparse.ArgumentParser(prog="stylesprite", description=description)
parser.add_argument("stylesheet", type=str, nargs=1, help="stylesheet to process")
parser.add_argument("-o", "--output", metavar="PATH", default=None,
                    help="file for the processed stylesheet (default: stdout)")
parser.add_argument("-r", "--image-root", metavar="DIR", default="",
                    help="directory image paths are relative to")
parser.add_argument("-i", "--output-file", metavar="PATH", default="sprite.png",
                    help="sprite image to write; the extension selects the format")
parser.add_argument("-p", "--placeholder", metavar="NAME", default="SPRITE_PLACEHOLDER",
                    help="placeholder token prefix")
parser.add_argument("--pngcrush", metavar="CMD", default=None,
                    help="recompress PNG output with CMD <in> <out>; CMD may carry its own flags")
parser.add_argument("-q", "--jpeg-quality", default=80, type=int,
                    help="quality of JPEG output")
parser.add_argument("-v", "--verbose", action="store_true",
                    help="use debug logging level")


def main(argv=None):
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    with open(args.stylesheet[0]) as f:
        text = f.read()

    try:
        sprite = Sprite(image_root=args.image_root, output_file=args.output_file,
                        placeholder=args.placeholder, pngcrush=args.pngcrush,
                        jpeg_quality=args.jpeg_quality)
        css = sprite.build(render(text, sprite))
    except SpriteError as err:
        print(f"stylesprite: error: {err}", file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, "w") as f:
            f.write(css)
    else:
        sys.stdout.write(css)
    return 0
