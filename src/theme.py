"""Color & style helpers.

Decisions:
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Palette overrides come from Config.colors (TODO_COLOR_* in env or .env).
"""
from __future__ import annotations
import os, sys
from dataclasses import dataclass
from typing import Mapping, Optional

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_COLORTERM = os.environ.get("COLORTERM", "").lower()
_USE_TRUECOLOR = _ENABLE and any(tok in _COLORTERM for tok in ("truecolor", "24bit"))

def _code(part: str) -> str:
    """Generate ANSI escape code for a given style part."""
    return f"\033[{part}m" if _ENABLE else ''

def _is_hex(value: str) -> bool:
    h = value.lstrip('#')
    return len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h)

def _hex_to_rgb(hex_code: str) -> tuple[int,int,int]:
    """Convert a hex color code to an RGB tuple."""
    h = hex_code.lstrip('#')
    return int(h[0:2],16), int(h[2:4],16), int(h[4:6],16)

def _to_256(r: int, g: int, b: int) -> int:
    """Approximate RGB to an index into the xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    return 16 + 36 * to_6(r) + 6 * to_6(g) + to_6(b)

def _from_hex(hex_code: str, background: bool = False) -> str:
    """Convert a hex color code to an ANSI escape sequence."""
    if not _ENABLE:
        return ''
    r, g, b = _hex_to_rgb(hex_code)
    layer = 48 if background else 38
    if _USE_TRUECOLOR:
        return f"\033[{layer};2;{r};{g};{b}m"
    return f"\033[{layer};5;{_to_256(r, g, b)}m"

RESET = _code('0')
BOLD = _code('1')
DIM = _code('2')
FG_BLACK = _code('30')

HEX_PRIMARY_DEFAULT = '#FFFFFF'
HEX_DONE_DEFAULT = '#A7E399'
HEX_SELECTED_DEFAULT = '#476EAE'
HEX_INSERT_DEFAULT = '#48B36A'


@dataclass
class Palette:
    header: str
    done: str
    selected: str
    insert: str
    dim: str = DIM


def build_palette(overrides: Optional[Mapping[str, str]] = None) -> Palette:
    """Resolve the palette; invalid hex overrides fall back to the defaults."""
    overrides = overrides or {}

    def pick(key: str, default: str) -> str:
        value = overrides.get(key, '')
        return '#' + value.lstrip('#') if _is_hex(value) else default

    return Palette(
        header=_from_hex(pick('primary', HEX_PRIMARY_DEFAULT)) + BOLD,
        done=_from_hex(pick('done', HEX_DONE_DEFAULT)),
        selected=_from_hex(pick('selected', HEX_SELECTED_DEFAULT), background=True) + FG_BLACK,
        insert=_from_hex(pick('insert', HEX_INSERT_DEFAULT)),
    )

def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text."""
    if not _ENABLE or not any(styles):
        return text
    return ''.join(styles) + text + RESET

__all__ = [
    'color','build_palette','Palette','RESET','BOLD','DIM'
]
