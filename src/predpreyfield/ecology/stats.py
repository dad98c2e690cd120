from __future__ import annotations

from typing import Dict, Iterable, List

import numpy as np

from predpreyfield.ecology.engine import TickReport
from predpreyfield.ecology.field import Field


def species_codes(species_names: Iterable[str]) -> Dict[str, int]:
    """Grid codes for Field.to_array; 0 is reserved for empty cells."""
    return {name: code for code, name in enumerate(species_names, start=1)}


def population_counts(field: Field, species_names: Iterable[str]) -> Dict[str, int]:
    codes = species_codes(species_names)
    counts = np.bincount(field.to_array(codes).ravel(), minlength=len(codes) + 1)
    return {name: int(counts[code]) for name, code in codes.items()}


def compute_stats(field: Field, species_names: Iterable[str]) -> Dict[str, Dict[str, float]]:
    ages: Dict[str, List[int]] = {name: [] for name in species_names}
    for organism in field.occupants():
        ages[organism.species.name].append(organism.age)
    stats: Dict[str, Dict[str, float]] = {}
    for name, values in ages.items():
        arr = np.asarray(values, dtype=np.float64)
        stats[name] = {
            "count": int(arr.size),
            "mean_age": float(arr.mean()) if arr.size else 0.0,
        }
    stats["field"] = {"occupancy": field.count() / (field.depth * field.width)}
    return stats


class PopulationHistory:
    """Per-tick population record, keyed like the plotting helpers expect."""

    def __init__(self, species_names: Iterable[str]):
        self.species_names = list(species_names)
        self.data: Dict[str, List[float]] = {"tick": [], "births": [], "deaths": []}
        for name in self.species_names:
            self.data[f"{name}_count"] = []

    def __len__(self) -> int:
        return len(self.data["tick"])

    def record(self, report: TickReport) -> None:
        self.data["tick"].append(report.tick)
        self.data["births"].append(report.births)
        self.data["deaths"].append(report.total_deaths)
        for name in self.species_names:
            self.data[f"{name}_count"].append(report.counts.get(name, 0))

    def counts_array(self) -> np.ndarray:
        """(ticks, species) array of population counts."""
        if not len(self):
            return np.zeros((0, len(self.species_names)), dtype=np.int64)
        return np.column_stack([self.data[f"{name}_count"] for name in self.species_names]).astype(np.int64)

    def peaks(self) -> Dict[str, int]:
        counts = self.counts_array()
        if counts.size == 0:
            return {name: 0 for name in self.species_names}
        return {name: int(value) for name, value in zip(self.species_names, counts.max(axis=0))}
