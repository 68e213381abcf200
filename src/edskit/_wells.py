"""Conversion between well names ("A1".."H12") and zero-based linear well indices.

Indices run row-major: ``index = row * cols + col``, so on a 96-well plate "A1" is 0,
"A12" is 11, "B1" is 12 and "H12" is 95.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import ConfigDict, Field, PositiveInt

from edskit._base import _BaseModel
from edskit._errors import InvalidColumn, InvalidWellName, InvalidWellRow, RowOutOfRange
from edskit._util import parse_leading_int

__all__ = [
    "DEFAULT_GRID",
    "PlateGrid",
    "well_index_to_name",
    "well_row_to_letter",
    "well_row_to_number",
    "well_to_index",
]

_A = ord("A")


class PlateGrid(_BaseModel):
    """Dimensions of a plate.  Only the 8x12 (96-well) layout is exercised."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    rows: PositiveInt = Field(default=8, le=26, description="Number of plate rows")
    cols: PositiveInt = Field(default=12, description="Number of plate columns")

    @property
    def size(self) -> int:
        return self.rows * self.cols


DEFAULT_GRID = PlateGrid()


def well_row_to_number(letter: str, grid: PlateGrid = DEFAULT_GRID) -> int:
    """Return the zero-based row number for the row letter at the start of `letter`."""
    letter = letter.upper()
    val = ord(letter[0]) - _A if letter else -1
    if val < 0 or val >= grid.rows:
        raise InvalidWellRow(f"Invalid well row: {letter!r}", row=letter)
    return val


def well_row_to_letter(row: int, grid: PlateGrid = DEFAULT_GRID) -> str:
    """Return the row letter for a zero-based row number."""
    # bounded by the column count, not the row count: on a 96-well plate rows
    # 8..11 still map to "I".."L".
    if row >= grid.cols:
        raise RowOutOfRange(
            f"Well row {row} too high for a {grid.size} well plate", row=row
        )
    return chr(_A + row)


def well_to_index(name: str, grid: PlateGrid = DEFAULT_GRID) -> int:
    """Return the zero-based linear index of a well name such as "C4".

    The row letter is case-insensitive.

    Raises
    ------
    InvalidWellName
        If `name` is not a 2 or 3 character string.
    InvalidWellRow
        If the row letter is outside the plate.
    InvalidColumn
        If the column number is outside the plate.
    """
    if not isinstance(name, str) or not 2 <= len(name) <= 3:
        raise InvalidWellName(f"Invalid well name: {name!r}", well=name)

    row = well_row_to_number(name, grid)
    col = parse_leading_int(name[1:])
    if col is None or not 1 <= col <= grid.cols:
        raise InvalidColumn(
            f"Invalid column number in well {name!r}: {name[1:]!r}", well=name
        )
    return row * grid.cols + (col - 1)


def well_index_to_name(index: int, grid: PlateGrid = DEFAULT_GRID) -> str:
    """Return the canonical well name ("A1", "H12", ...) for a linear index.

    `index` is not range checked beyond what `well_row_to_letter` enforces.
    """
    col = index % grid.cols + 1
    row = index // grid.cols
    return f"{well_row_to_letter(row, grid)}{col}"
