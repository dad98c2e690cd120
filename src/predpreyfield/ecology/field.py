"""
Rectangular grid holding at most one occupant per cell.

A Field is one generation snapshot. The step driver reads organisms from the
current Field and writes their outcome into a second, initially empty Field.
Adjacency is the bounded 8-neighbourhood (no wrap-around); every adjacency
query shuffles its result with the caller's random source so that hunting and
movement have no directional bias.
"""
from __future__ import annotations

import random
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from predpreyfield.ecology.location import Location

_NEIGHBOUR_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)


class Field:
    def __init__(self, depth: int, width: int):
        if depth < 1 or width < 1:
            raise ValueError(f"Field dimensions must be positive, got depth={depth}, width={width}")
        self.depth = depth
        self.width = width
        self._grid: List[List[Optional[object]]] = [[None] * width for _ in range(depth)]

    def __repr__(self) -> str:
        return f"Field(depth={self.depth}, width={self.width}, occupants={self.count()})"

    def in_bounds(self, location: Location) -> bool:
        return 0 <= location.row < self.depth and 0 <= location.col < self.width

    def _check(self, location: Location) -> None:
        if not self.in_bounds(location):
            raise IndexError(f"Location {location} outside field {self.depth}x{self.width}")

    def place(self, occupant, location: Location):
        """
        Store occupant at location, overwriting whatever was there.
        Returns the displaced occupant (or None).
        """
        self._check(location)
        previous = self._grid[location.row][location.col]
        self._grid[location.row][location.col] = occupant
        return previous

    def occupant_at(self, location: Location):
        self._check(location)
        return self._grid[location.row][location.col]

    def is_free(self, location: Location) -> bool:
        return self.occupant_at(location) is None

    def clear(self) -> None:
        for row in self._grid:
            for col in range(self.width):
                row[col] = None

    def neighbours(self, location: Location) -> List[Location]:
        """In-bounds neighbours of location in a fixed order."""
        self._check(location)
        neighbours = []
        for dr, dc in _NEIGHBOUR_OFFSETS:
            row = location.row + dr
            col = location.col + dc
            if 0 <= row < self.depth and 0 <= col < self.width:
                neighbours.append(Location(row, col))
        return neighbours

    def adjacent_locations(self, location: Location, rng: random.Random) -> List[Location]:
        """In-bounds neighbours of location in a fresh random order (empty on a 1x1 field)."""
        neighbours = self.neighbours(location)
        rng.shuffle(neighbours)
        return neighbours

    def free_adjacent_location(self, location: Location, rng: random.Random) -> Optional[Location]:
        for where in self.adjacent_locations(location, rng):
            if self._grid[where.row][where.col] is None:
                return where
        return None

    def random_adjacent_location(self, location: Location, rng: random.Random) -> Location:
        """Uniformly chosen neighbour of location, occupied or not."""
        neighbours = self.neighbours(location)
        if not neighbours:
            raise ValueError(f"Location {location} has no neighbours in a {self.depth}x{self.width} field")
        return rng.choice(neighbours)

    def locations(self) -> Iterator[Location]:
        for row in range(self.depth):
            for col in range(self.width):
                yield Location(row, col)

    def occupied(self) -> Iterator[Tuple[Location, object]]:
        """Row-major (location, occupant) pairs of the non-empty cells."""
        for row in range(self.depth):
            for col, occupant in enumerate(self._grid[row]):
                if occupant is not None:
                    yield Location(row, col), occupant

    def occupants(self) -> List[object]:
        return [occupant for _, occupant in self.occupied()]

    def count(self) -> int:
        return sum(1 for row in self._grid for occupant in row if occupant is not None)

    def to_array(self, codes: Dict[str, int]) -> np.ndarray:
        """
        Occupancy as a (depth, width) integer grid: 0 for an empty cell,
        codes[species name] for an occupied one.
        """
        grid = np.zeros((self.depth, self.width), dtype=np.int16)
        for location, occupant in self.occupied():
            grid[location.row, location.col] = codes[occupant.species.name]
        return grid
