"""Single-line text entry with a cursor, used while composing a task."""
import unicodedata


def char_width(ch: str) -> int:
    """Terminal cells taken by one character (wide East Asian glyphs use 2)."""
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ('W', 'F') else 1


def text_width(text: str) -> int:
    return sum(char_width(ch) for ch in text)


class EntryBuffer:
    def __init__(self, value: str = ''):
        self._value = value
        self.cursor = len(value)

    def value(self) -> str:
        return self._value

    def reset(self) -> None:
        self._value = ''
        self.cursor = 0

    def visual_cursor(self) -> int:
        """Column of the cursor in terminal cells."""
        return text_width(self._value[:self.cursor])

    # -------------------- edits --------------------
    def insert(self, text: str) -> None:
        self._value = self._value[:self.cursor] + text + self._value[self.cursor:]
        self.cursor += len(text)

    def backspace(self) -> None:
        if self.cursor == 0:
            return
        self._value = self._value[:self.cursor - 1] + self._value[self.cursor:]
        self.cursor -= 1

    def delete(self) -> None:
        self._value = self._value[:self.cursor] + self._value[self.cursor + 1:]

    def delete_prev_word(self) -> None:
        start = self.cursor
        while start > 0 and self._value[start - 1].isspace():
            start -= 1
        while start > 0 and not self._value[start - 1].isspace():
            start -= 1
        self._value = self._value[:start] + self._value[self.cursor:]
        self.cursor = start

    def delete_to_start(self) -> None:
        self._value = self._value[self.cursor:]
        self.cursor = 0

    def delete_to_end(self) -> None:
        self._value = self._value[:self.cursor]

    # -------------------- movement --------------------
    def left(self) -> None:
        self.cursor = max(0, self.cursor - 1)

    def right(self) -> None:
        self.cursor = min(len(self._value), self.cursor + 1)

    def home(self) -> None:
        self.cursor = 0

    def end(self) -> None:
        self.cursor = len(self._value)

    def handle_key(self, key: str) -> bool:
        """Apply an editing key. Returns False when the key means nothing here."""
        action = EDIT_KEYS.get(key)
        if action is not None:
            action(self)
            return True
        if len(key) == 1 and key.isprintable():
            self.insert(key)
            return True
        return False


EDIT_KEYS = {
    'backspace': EntryBuffer.backspace,
    'ctrl+h': EntryBuffer.backspace,
    'delete': EntryBuffer.delete,
    'ctrl+w': EntryBuffer.delete_prev_word,
    'ctrl+u': EntryBuffer.delete_to_start,
    'ctrl+k': EntryBuffer.delete_to_end,
    'left': EntryBuffer.left,
    'right': EntryBuffer.right,
    'home': EntryBuffer.home,
    'ctrl+a': EntryBuffer.home,
    'end': EntryBuffer.end,
    'ctrl+e': EntryBuffer.end,
}
