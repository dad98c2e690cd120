from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """A (row, col) cell coordinate on a Field."""

    row: int
    col: int

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"
