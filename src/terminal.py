"""Terminal backend: raw mode, key events and painting frames with ANSI codes.

Terminal is a context manager. Entering it switches stdin to raw mode, moves
to the alternate screen (optional) and hides the cursor; leaving it undoes all
of that on every exit path, including exceptions raised inside the block.
"""
import codecs
import os
import select
import shutil
import sys
from collections import deque
from typing import Deque, List, Optional, TextIO, Tuple

from entry import char_width, text_width
from logging_setup import get_logger
from render import Frame, HIGHLIGHT_SYMBOL
from theme import Palette, build_palette, color

logger = get_logger(__name__)

ESC = "\x1b"
ESC_TIMEOUT = 0.05
INPUT_PREFIX = " Input: "
CHROME_LINES = 6  # title, rule, rule, input, rule/notice, footer

# --- terminal control sequences ---
ALT_SCREEN_ON = "\033[?1049h"
ALT_SCREEN_OFF = "\033[?1049l"
HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"
HOME = "\033[H"
CLEAR_EOL = "\033[K"
CLEAR_EOS = "\033[J"

CSI_KEYS = {
    'A': 'up', 'B': 'down', 'C': 'right', 'D': 'left',
    'H': 'home', 'F': 'end',
    '1~': 'home', '7~': 'home', '4~': 'end', '8~': 'end',
    '2~': 'insert', '3~': 'delete', '5~': 'pgup', '6~': 'pgdn',
}

CONTROL_KEYS = {
    '\r': 'enter',
    '\n': 'enter',
    '\t': 'tab',
    '\x7f': 'backspace',
    '\x08': 'backspace',
    '\x00': 'ctrl+space',
}


class TerminalError(Exception):
    """The interactive editor needs a real terminal on stdin."""


# -------------------- key decoding --------------------
def _decode_control(ch: str) -> str:
    if ch in CONTROL_KEYS:
        return CONTROL_KEYS[ch]
    if '\x01' <= ch <= '\x1a':
        return 'ctrl+' + chr(ord(ch) + 96)
    return ch


def parse_keys(text: str) -> List[str]:
    """Split raw terminal input into key names or single characters.

    Named keys: up/down/left/right, home/end, insert/delete, pgup/pgdn,
    enter, tab, backspace, esc, ctrl+<letter>, alt+<key>. Unknown escape
    sequences are dropped.
    """
    keys: List[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch != ESC:
            keys.append(_decode_control(ch))
            i += 1
            continue
        if i + 1 >= n or text[i + 1] == ESC:
            keys.append('esc')
            i += 1
            continue
        if text[i + 1] not in '[O':
            # meta prefix: ESC + key arrives as one Alt chord
            keys.append('alt+' + _decode_control(text[i + 1]))
            i += 2
            continue
        # CSI / SS3: parameters then one final byte in @..~
        j = i + 2
        while j < n and not ('@' <= text[j] <= '~'):
            j += 1
        if j >= n:
            i = n
            break
        params, final = text[i + 2:j], text[j]
        name = CSI_KEYS.get(final if final != '~' else params.split(';')[0] + '~')
        if name:
            keys.append(name)
        else:
            logger.debug('dropped escape sequence %r', text[i:j + 1])
        i = j + 1
    return keys


def incomplete_escape(text: str) -> bool:
    """True when text ends in the middle of an escape sequence."""
    pos = text.rfind(ESC)
    if pos < 0:
        return False
    tail = text[pos:]
    if tail == ESC:
        return True
    if tail[1] not in '[O':
        return False
    return not any('@' <= c <= '~' for c in tail[2:])


# -------------------- layout --------------------
def visible_window(total: int, selected: Optional[int], height: int, offset: int = 0) -> int:
    """Return the first visible row so the selected row stays on screen."""
    if height <= 0 or total <= height:
        return 0
    offset = max(0, min(offset, total - height))
    if selected is None:
        return offset
    if selected < offset:
        return selected
    if selected >= offset + height:
        return selected - height + 1
    return offset


def fit(text: str, width: int) -> str:
    """Cut text to at most width cells and pad it to exactly width."""
    out: List[str] = []
    used = 0
    for ch in text:
        w = char_width(ch)
        if used + w > width:
            break
        out.append(ch)
        used += w
    return ''.join(out) + ' ' * max(0, width - used)


def layout_frame(frame: Frame, width: int, height: int, palette: Palette,
                 offset: int = 0) -> Tuple[List[str], Optional[Tuple[int, int]], int]:
    """Lay a frame out on a width x height screen.

    Returns (lines, cursor, offset): cursor is a 0-based (row, column) when
    the input field is active, offset is the new scroll position.
    """
    width = max(width, 10)
    list_height = max(1, height - CHROME_LINES)
    rule = color('-' * width, palette.dim)
    lines: List[str] = [color(fit(frame.title.center(width), width), palette.header), rule]

    offset = visible_window(len(frame.rows), frame.selected, list_height, offset)
    body = frame.rows[offset:offset + list_height]
    if not frame.rows:
        lines.append(color(fit('   (no tasks, press e to add one)', width), palette.dim))
        body_len = 1
    else:
        for row in body:
            marker = HIGHLIGHT_SYMBOL if row.selected else ' ' * len(HIGHLIGHT_SYMBOL)
            text = fit(marker + row.text, width)
            if row.selected:
                lines.append(color(text, palette.selected))
            elif row.done:
                lines.append(color(text, palette.done))
            else:
                lines.append(text)
        body_len = len(body)
    lines.extend([''] * (list_height - body_len))

    lines.append(rule)
    input_style = palette.insert if frame.input.active else palette.dim
    lines.append(color(fit(INPUT_PREFIX + frame.input.value, width), input_style))
    if frame.notice:
        lines.append(color(fit(' ' + frame.notice, width), palette.header))
    else:
        lines.append(rule)
    lines.append(color(fit(frame.footer.center(width), width), palette.dim))

    cursor = None
    if frame.input.active:
        column = min(width - 1, text_width(INPUT_PREFIX) + frame.input.cursor_column)
        cursor = (len(lines) - 3, column)
    return lines, cursor, offset


class Terminal:
    def __init__(self, alt_screen: bool = True, palette: Optional[Palette] = None,
                 stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.alt_screen = alt_screen
        self.palette = palette or build_palette()
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        try:
            self.fd: Optional[int] = self.stdin.fileno()
        except (AttributeError, ValueError):
            self.fd = None
        self._old_settings = None
        self._decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
        self._pending: Deque[str] = deque()
        self._offset = 0

    def __enter__(self) -> 'Terminal':
        if self.fd is None or not os.isatty(self.fd):
            raise TerminalError('interactive mode needs a terminal; use add/delete/print instead')
        import termios
        import tty

        self._old_settings = termios.tcgetattr(self.fd)
        tty.setraw(self.fd)
        if self.alt_screen:
            self._write(ALT_SCREEN_ON)
        self._write(HIDE_CURSOR)
        self.stdout.flush()
        logger.debug('terminal entered raw mode')
        return self

    def __exit__(self, *exc_info) -> None:
        if self._old_settings is not None:
            import termios

            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._old_settings)
            self._old_settings = None
        self._write(SHOW_CURSOR)
        if self.alt_screen:
            self._write(ALT_SCREEN_OFF)
        self.stdout.flush()
        logger.debug('terminal restored')

    def _write(self, data: str) -> None:
        self.stdout.write(data)

    # -------------------- events --------------------
    def _read_chunk(self) -> str:
        data = os.read(self.fd, 1024)
        if not data:
            raise EOFError('terminal input closed')
        return self._decoder.decode(data)

    def read_key(self) -> str:
        """Block until the next key press and return its name."""
        while not self._pending:
            text = self._read_chunk()
            while incomplete_escape(text) and select.select([self.fd], [], [], ESC_TIMEOUT)[0]:
                text += self._read_chunk()
            self._pending.extend(parse_keys(text))
        return self._pending.popleft()

    # -------------------- painting --------------------
    def paint(self, frame: Frame) -> None:
        size = shutil.get_terminal_size((80, 24))
        lines, cursor, self._offset = layout_frame(
            frame, size.columns, size.lines, self.palette, self._offset)
        out = [HOME, (CLEAR_EOL + '\r\n').join(lines), CLEAR_EOL, CLEAR_EOS]
        if cursor is not None:
            row, col = cursor
            out.append(f"\033[{row + 1};{col + 1}H{SHOW_CURSOR}")
        else:
            out.append(HIDE_CURSOR)
        self._write(''.join(out))
        self.stdout.flush()
