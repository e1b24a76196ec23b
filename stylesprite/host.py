"""
Minimal stylesheet pass that resolves sprite() calls.

Full stylesheet compilers call Registry.register themselves; this pass is
enough for plain CSS where ``background-position: sprite("a.png")`` and
``sprite("b.png", "align: right; height: 40")`` are the only calls to
expand.
"""

import bisect
import re

from .options import Reference

SPRITE_CALL = re.compile(r"""
    \b(?P<func>[\w-]+)\(\s*
    (?P<q1>["'])(?P<filename>.*?)(?P=q1)\s*
    (?:,\s*(?P<q2>["'])(?P<options>.*?)(?P=q2)\s*)?
    \)""", re.VERBOSE)


def render(text, registry, function="sprite"):
    """Replace each sprite() call in text with the token from registry."""
    line_starts = [m.end() for m in re.finditer("\n", text)]

    def expand(match):
        if match.group("func") != function:
            return match.group(0)
        lineno = bisect.bisect_right(line_starts, match.start()) + 1
        return registry.register(Reference(match.group("filename"), lineno),
                                 match.group("options"))

    return SPRITE_CALL.sub(expand, text)
