"""
Fixed per-species parameters and the default food chain.

A species with a food value is a predator: it keeps a food level that runs
down every tick and hunts the species named in `hunts`. Without a food value
it is prey. Adding a tier to the chain is a matter of configuring another
Species, not writing a new class.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

PREY = "prey"
PREDATOR = "predator"


@dataclass(frozen=True)
class Species:
    name: str
    breeding_age: int
    max_age: int
    breeding_probability: float
    max_litter_size: int
    food_value: Optional[int] = None  # ticks a full predator survives without eating
    hunts: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # frozen, so normalise through object.__setattr__
        object.__setattr__(self, "hunts", tuple(self.hunts))
        if not self.name:
            raise ValueError("Species name must not be empty")
        if self.breeding_age < 0:
            raise ValueError(f"{self.name}: breeding_age must be >= 0, got {self.breeding_age}")
        if self.max_age < 0:
            raise ValueError(f"{self.name}: max_age must be >= 0, got {self.max_age}")
        if not 0.0 <= self.breeding_probability <= 1.0:
            raise ValueError(
                f"{self.name}: breeding_probability must be in [0, 1], got {self.breeding_probability}"
            )
        if self.max_litter_size < 1:
            raise ValueError(f"{self.name}: max_litter_size must be >= 1, got {self.max_litter_size}")
        if self.food_value is None:
            if self.hunts:
                raise ValueError(f"{self.name}: a species that hunts needs a food_value")
        else:
            if self.food_value < 1:
                raise ValueError(f"{self.name}: food_value must be >= 1, got {self.food_value}")
            if not self.hunts:
                raise ValueError(f"{self.name}: a species with a food_value must hunt something")
            if self.name in self.hunts:
                raise ValueError(f"{self.name}: a species cannot hunt itself")

    @property
    def role(self) -> str:
        return PREDATOR if self.food_value is not None else PREY

    @property
    def is_predator(self) -> bool:
        return self.food_value is not None

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, object]) -> "Species":
        try:
            return cls(
                name=name,
                breeding_age=int(data["breeding_age"]),
                max_age=int(data["max_age"]),
                breeding_probability=float(data["breeding_probability"]),
                max_litter_size=int(data["max_litter_size"]),
                food_value=None if data.get("food_value") is None else int(data["food_value"]),
                hunts=tuple(data.get("hunts", ())),
            )
        except KeyError as exc:
            raise ValueError(f"Species {name!r} is missing parameter {exc.args[0]!r}") from exc


RABBIT = Species("rabbit", breeding_age=5, max_age=30, breeding_probability=0.6, max_litter_size=5)
FOX = Species(
    "fox", breeding_age=5, max_age=15, breeding_probability=0.02, max_litter_size=8, food_value=8, hunts=("rabbit",)
)
TIGER = Species(
    "tiger", breeding_age=3, max_age=50, breeding_probability=0.15, max_litter_size=6, food_value=8, hunts=("fox",)
)


def default_species() -> Dict[str, Species]:
    return {species.name: species for species in (RABBIT, FOX, TIGER)}


def validate_food_chain(species: Mapping[str, Species]) -> None:
    for name, kind in species.items():
        if name != kind.name:
            raise ValueError(f"Species registered as {name!r} is named {kind.name!r}")
        for target in kind.hunts:
            if target not in species:
                raise ValueError(f"{name} hunts unknown species {target!r}")
