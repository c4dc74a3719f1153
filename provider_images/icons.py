"""
icons.py — Deterministic icon + colour assignment for provider cards.

Pure functions only: the same (identity, specialties text) always gives the
same (icon, colour) pair, in every process, on every platform.

  string_hash()  — 32-bit "h * 31 + c" hash over UTF-16 code units, abs'd
  IconAssigner   — first keyword hit picks the icon, hash picks the colour
"""

import logging
from dataclasses import dataclass
from enum import Enum

log = logging.getLogger(__name__)


class Icon(str, Enum):
    PALETTE   = 'palette'
    CODE      = 'code'
    ROCKET    = 'rocket'
    DUMBBELL  = 'dumbbell'
    TARGET    = 'target'
    TROPHY    = 'trophy'
    MUSIC     = 'music'
    CAMERA    = 'camera'
    TREE_PINE = 'tree-pine'
    COMPASS   = 'compass'
    WAVES     = 'waves'
    BOOK_OPEN = 'book-open'
    HEART     = 'heart'
    STAR      = 'star'
    SPARKLES  = 'sparkles'
    FLOWER    = 'flower'
    SUN       = 'sun'
    MOON      = 'moon'
    SMILE     = 'smile'


@dataclass(frozen=True)
class IconAssignment:
    icon:        Icon
    color_class: str


def _utf16_units(text: str):
    """Yield UTF-16 code units, so astral characters count as two."""
    data = text.encode('utf-16-le', errors='surrogatepass')
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def string_hash(text: str) -> int:
    """
    Return abs() of the signed 32-bit "h = h * 31 + c" hash of text.

    Same value as the ((h << 5) - h) + c hash the web client computes.
    """
    h = 0
    for unit in _utf16_units(text or ''):
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


class IconAssigner:
    """
    Args:
        keyword_icons:  ordered (keyword, Icon) pairs; first hit wins
        fallback_icons: icons picked by hash when no keyword matches
        palette:        colour classes picked by hash
    """

    def __init__(self, keyword_icons, fallback_icons, palette):
        if not fallback_icons or not palette:
            raise ValueError('IconAssigner needs at least one fallback icon and one colour')
        self.keyword_icons = tuple(keyword_icons)
        self.fallback_icons = tuple(fallback_icons)
        self.palette = tuple(palette)

    def match_keyword(self, text: str):
        lowered = text.lower()
        for keyword, icon in self.keyword_icons:
            if keyword in lowered:
                return icon
        return None

    def assign(self, identity: str, specialties_text: str = '') -> IconAssignment:
        identity = identity or ''
        h = string_hash(identity)

        icon = self.match_keyword(f'{identity} {specialties_text or ""}')
        if icon is None:
            icon = self.fallback_icons[h % len(self.fallback_icons)]

        color = self.palette[h % len(self.palette)]
        log.debug(f'Icon for {identity!r}: {icon.value} / {color}')
        return IconAssignment(icon=icon, color_class=color)
