"""Turn user color text into an RGB(A) value.

Resolution order, first match wins:

1. ``None`` means "no preference" and resolves to ``None``.
2. ``black`` and ``auto`` (any case) resolve to black.
3. A CSS3 color name resolves to its value, unless the lookup produced black.
4. Anything else is read as hex, ``AARRGGBB`` or ``RRGGBB`` with ``#``
   characters ignored.

The name lookup reports unknown names as black, so a black result from it is
treated as a miss. Black through a name is therefore only reachable via the
literal ``black``/``auto`` shortcut or hex.
"""

from __future__ import annotations

import logging
import string
from typing import overload

import webcolors

from esplight.errors import FormatError
from esplight.models import BLACK, ResolvedColor

logger = logging.getLogger(__name__)

BLACK_TOKENS = frozenset({"BLACK", "AUTO"})


def _lookup_name(text: str) -> ResolvedColor:
    try:
        rgb = webcolors.name_to_rgb(text)
    except ValueError:
        return BLACK
    return ResolvedColor(rgb.red, rgb.green, rgb.blue)


def _parse_hex(text: str) -> ResolvedColor:
    digits = text.replace("#", "")
    if len(digits) != 8:
        digits = f"FF{digits}"
    if len(digits) != 8 or not all(ch in string.hexdigits for ch in digits):
        raise FormatError(text)

    value = int(digits, 16)
    return ResolvedColor(
        red=(value >> 16) & 0xFF,
        green=(value >> 8) & 0xFF,
        blue=value & 0xFF,
        alpha=(value >> 24) & 0xFF,
    )


@overload
def resolve_color(text: str) -> ResolvedColor: ...


@overload
def resolve_color(text: None) -> None: ...


def resolve_color(text: str | None) -> ResolvedColor | None:
    if text is None:
        return None

    if text.upper() in BLACK_TOKENS:
        return BLACK

    color = _lookup_name(text)
    if not color.is_black:
        logger.debug("Resolved color name '%s' to %s", text, color.hex)
        return color

    color = _parse_hex(text)
    logger.debug("Resolved hex color %s to %s (alpha=%d)", text, color.hex, color.alpha)
    return color
