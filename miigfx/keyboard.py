"""On-screen keyboard cursor and input state."""

from __future__ import annotations

from collections.abc import Sequence

MAX_INPUT_SIZE = 30


class Keyboard:
    """A grid of keys with a cursor, a shift layer and a typed string."""

    def __init__(self, normal_rows: Sequence[str], shift_rows: Sequence[str]) -> None:
        normal = list(normal_rows)
        shift = list(shift_rows)
        if not normal or not shift:
            raise ValueError("keyboard layouts need at least one row")
        if len(normal) != len(shift):
            raise ValueError("normal and shift layouts need the same number of rows")
        if not all(normal) or not all(shift):
            raise ValueError("keyboard rows must not be empty")
        self._normal = normal
        self._shift = shift
        self._shifted = False
        self.row = 0
        self.column = 0
        self.input = ""
        self.current_key = ""
        self._set_current_key()

    @property
    def shifted(self) -> bool:
        return self._shifted

    @property
    def _rows(self) -> list[str]:
        return self._shift if self._shifted else self._normal

    def _set_current_key(self) -> None:
        self.current_key = self._rows[self.row][self.column]

    def _clamp_column(self) -> None:
        last = self.row_size(self.row) - 1
        if self.column > last:
            self.column = last

    def row_size(self, row: int) -> int:
        """Number of keys in ``row`` of the active layout."""
        return len(self._rows[row])

    def left(self) -> int:
        """Move the cursor left, wrapping; return the new column."""
        if self.column > 0:
            self.column -= 1
        else:
            self.column = self.row_size(self.row) - 1
        self._set_current_key()
        return self.column

    def right(self) -> int:
        """Move the cursor right, wrapping; return the new column."""
        if self.column < self.row_size(self.row) - 1:
            self.column += 1
        else:
            self.column = 0
        self._set_current_key()
        return self.column

    def up(self) -> int:
        """Move the cursor up, wrapping; return the new row."""
        if self.row > 0:
            self.row -= 1
        else:
            self.row = len(self._rows) - 1
        self._clamp_column()
        self._set_current_key()
        return self.row

    def down(self) -> int:
        """Move the cursor down, wrapping; return the new row."""
        if self.row < len(self._rows) - 1:
            self.row += 1
        else:
            self.row = 0
        self._clamp_column()
        self._set_current_key()
        return self.row

    def shift_pressed(self) -> None:
        """Toggle between the normal and shift layouts."""
        self._shifted = not self._shifted
        self._clamp_column()
        self._set_current_key()

    def key_pressed(self) -> None:
        """Append the key under the cursor while input is below the size limit."""
        if len(self.input.encode("utf-8")) < MAX_INPUT_SIZE:
            self.input += self.current_key

    def del_pressed(self) -> None:
        """Remove the last typed character, if any."""
        self.input = self.input[:-1]

    def get_key(self, row: int, column: int) -> str:
        """Return the key at ``row``, ``column`` of the active layout."""
        keys = self._rows[row]
        if not 0 <= column < len(keys):
            raise IndexError(f"column {column} is outside row {row}")
        return keys[column]