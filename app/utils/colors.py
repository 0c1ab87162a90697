"""
Group colour normalization for reports
"""

import colorsys
import re
from typing import Optional, Tuple

RGB = Tuple[int, int, int]

FALLBACK_RGB: RGB = (100, 116, 139)

PALETTE = [
    "#ef4444",
    "#f97316",
    "#f59e0b",
    "#84cc16",
    "#22c55e",
    "#14b8a6",
    "#06b6d4",
    "#3b82f6",
    "#6366f1",
    "#8b5cf6",
    "#d946ef",
    "#ec4899",
]

_SHORT_HEX = re.compile(r"^#([0-9a-f]{3})$", re.IGNORECASE)
_HEX = re.compile(r"^#?([0-9a-f]{6})$", re.IGNORECASE)
_RGB_FUNC = re.compile(
    r"^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})(?:\s*,\s*(0?\.\d+|1(?:\.0+)?)\s*)?\)$",
    re.IGNORECASE,
)

def hash_string(value: str) -> int:
    """32-bit FNV-1a"""
    h = 2166136261
    for char in value:
        h ^= ord(char)
        h = (h * 16777619) & 0xFFFFFFFF
    return h

def parse_color(raw: Optional[str]) -> Optional[RGB]:
    """Parse #rgb, #rrggbb or rgb()/rgba(); None when unrecognised"""
    if not raw:
        return None
    value = raw.strip()

    match = _SHORT_HEX.match(value)
    if match:
        h = match.group(1)
        return (int(h[0] * 2, 16), int(h[1] * 2, 16), int(h[2] * 2, 16))

    match = _HEX.match(value)
    if match:
        h = match.group(1)
        return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))

    match = _RGB_FUNC.match(value)
    if match:
        return tuple(max(0, min(255, int(match.group(i)))) for i in (1, 2, 3))

    return None

def pick_palette_rgb(seed: str) -> RGB:
    return parse_color(PALETTE[hash_string(seed) % len(PALETTE)]) or FALLBACK_RGB

def is_nearly_gray(rgb: RGB) -> bool:
    r, g, b = rgb
    return abs(r - g) < 12 and abs(g - b) < 12 and abs(r - b) < 12

def harmonize(rgb: RGB) -> RGB:
    """Pull saturation and lightness into a readable band, keeping the hue"""
    if is_nearly_gray(rgb):
        return rgb
    h, l, s = colorsys.rgb_to_hls(*(c / 255 for c in rgb))
    s = max(0.58, min(0.82, s))
    l = max(0.45, min(0.58, l))
    return tuple(round(c * 255) for c in colorsys.hls_to_rgb(h, l, s))

def to_hex(rgb: RGB) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)

def group_color(color: Optional[str], seed: str) -> str:
    """Display colour for a group; gray or unparsable colours get a palette pick"""
    parsed = parse_color(color)
    if parsed is None or is_nearly_gray(parsed):
        parsed = pick_palette_rgb(seed)
    return to_hex(harmonize(parsed))
