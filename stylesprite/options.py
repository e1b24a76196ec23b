"""
Parsing of per-reference option strings and the registry of unique image
blocks.

An option string looks like ``key1: value1; key2: value2``. Each reference
is merged over DEFAULTS, validated against KEYS and interned by its
signature, so identical references share one block and one placeholder.
"""

import logging
import math
from collections import namedtuple
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .errors import ValidationError

logger = logging.getLogger(__name__)

NUMBER = "number"
PREDEFINED = "predefined"
BOOLEAN = "boolean"

KEYS = {
    "width": (NUMBER, None),
    "height": (NUMBER, None),
    "align": (PREDEFINED, ("block", "left", "center", "right")),
    "valign": (PREDEFINED, ("block", "bottom", "middle", "top")),
    "resize": (BOOLEAN, None),
    "repeat": (PREDEFINED, ("no", "x", "y")),
    "limit-repeat-x": (NUMBER, None),
    "limit-repeat-y": (NUMBER, None),
    "totalwidth": (NUMBER, None),
    "totalheight": (NUMBER, None),
    "padwidth": (NUMBER, None),
    "padheight": (NUMBER, None),
}

DEFAULTS = {
    "width": 0,
    "height": 0,
    "align": "block",
    "valign": "block",
    "resize": False,
    "repeat": "no",
    "limit-repeat-y": 300,
    "limit-repeat-x": 0,
}

# filename value plus the stylesheet line it was found on
Reference = namedtuple("Reference", ["value", "lineno"])


class Fill(Enum):
    """Block width that stretches to the final canvas width."""

    CANVAS = "100%"


BlockWidth = Union[int, Fill]


def _number(key, value):
    # an empty value means "unset", same as the 0 default
    if not value:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid number value '{value}' for {key}", key=key) from None
    if not math.isfinite(number):
        raise ValidationError(f"Invalid number value '{value}' for {key}", key=key)
    if number < 0:
        raise ValidationError(f"Negative value '{value}' for {key}", key=key)
    # pixels are whole; round half up like the CSS side expects
    return int(math.floor(number + 0.5))


def validate(key, value):
    """Check that key is known and convert value to its typed form."""
    if key not in KEYS:
        raise ValidationError(f"Invalid key '{key}'", key=key)

    kind, allowed = KEYS[key]
    if kind == NUMBER:
        return _number(key, value)
    if kind == PREDEFINED:
        if value not in allowed:
            raise ValidationError(
                f"Unknown value '{value}' for {key}, allowed: {','.join(allowed)}", key=key)
        return value
    return not (value in ("false", "0") or not value)


def parse_options(raw):
    """Return a full option record for raw, defaults included."""
    options = dict(DEFAULTS)
    for clause in (raw or "").split(";"):
        key, _, value = clause.partition(":")
        key = key.strip().lower()
        if not key:
            continue
        options[key] = validate(key, value.strip())
    return options


def _format_value(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def signature(filename, options):
    items = dict(options, filename=filename)
    return ";".join(f"{key}={_format_value(items[key])}" for key in sorted(items))


@dataclass
class ImageBlockSpec:
    filename: str
    width: int = 0
    height: int = 0
    align: str = "block"
    valign: str = "block"
    resize: bool = False
    repeat: str = "no"
    limit_repeat_x: int = 0
    limit_repeat_y: int = 300
    totalwidth: Optional[int] = None
    totalheight: Optional[int] = None
    padwidth: Optional[int] = None
    padheight: Optional[int] = None

    # bookkeeping, excluded from the signature
    id: int = 0
    lineno: Optional[int] = None
    signature: str = ""

    # filled in while building
    image_width: int = 0
    image_height: int = 0
    block_width: BlockWidth = 0
    block_height: int = 0
    image: object = None

    @classmethod
    def from_options(cls, filename, options):
        fields = {key.replace("-", "_"): value for key, value in options.items()}
        return cls(filename=filename, **fields)


class Registry:
    """Interns image references in first-seen order."""

    def __init__(self, placeholder="SPRITE_PLACEHOLDER"):
        self.placeholder = placeholder
        self.images = []
        self._by_signature = {}
        self._next_id = 0

    def __len__(self):
        return len(self.images)

    def __iter__(self):
        return iter(self.images)

    def token(self, spec):
        return f"{self.placeholder}({spec.id})"

    def register(self, filename, raw_options=None):
        """
        Register a reference and return its placeholder token.

        filename may be a plain string or a Reference carrying the source
        line number. raw_options may likewise be a Reference, a string or
        None.
        """
        lineno = None
        if isinstance(filename, Reference):
            filename, lineno = filename.value, filename.lineno
        if isinstance(raw_options, Reference):
            raw_options = raw_options.value
        if not filename:
            raise ValidationError("Sprite filename can not be empty", key="filename")

        options = parse_options(raw_options)
        sig = signature(filename, options)

        spec = self._by_signature.get(sig)
        if spec is not None:
            logger.debug("reusing %s for %s", self.token(spec), filename)
            return self.token(spec)

        self._next_id += 1
        spec = ImageBlockSpec.from_options(filename, options)
        spec.id = self._next_id
        spec.lineno = lineno
        spec.signature = sig
        self._by_signature[sig] = spec
        self.images.append(spec)
        return self.token(spec)
