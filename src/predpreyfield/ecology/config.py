from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, Mapping, Optional
import json

from predpreyfield.ecology.organism import BIRTH_PLACEMENTS, FREE
from predpreyfield.ecology.species import Species, default_species, validate_food_chain

# Optional config file (JSON). If present, it seeds WorldConfig before overrides.
CONFIG_PATH = Path(__file__).with_name("field_config.json")


@dataclass
class WorldConfig:
    depth: int = 80
    width: int = 120
    species: Dict[str, Species] = field(default_factory=default_species)
    # Per-cell chance of seeding each species, tried in this order.
    creation_probabilities: Dict[str, float] = field(
        default_factory=lambda: {
            "rabbit": 0.08,
            "fox": 0.02,
            "tiger": 0.005,
        }
    )
    birth_placement: str = FREE
    shuffle_order: bool = False

    def validate(self) -> "WorldConfig":
        if self.depth < 1 or self.width < 1:
            raise ValueError(f"Field dimensions must be positive, got {self.depth}x{self.width}")
        validate_food_chain(self.species)
        total = 0.0
        for name, probability in self.creation_probabilities.items():
            if name not in self.species:
                raise ValueError(f"Creation probability given for unknown species {name!r}")
            if not 0.0 <= probability <= 1.0:
                raise ValueError(f"Creation probability for {name} must be in [0, 1], got {probability}")
            total += probability
        if total > 1.0 + 1e-9:
            raise ValueError(f"Creation probabilities sum to {total:.3f} > 1")
        if self.birth_placement not in BIRTH_PLACEMENTS:
            raise ValueError(f"birth_placement must be one of {BIRTH_PLACEMENTS}, got {self.birth_placement!r}")
        return self


def _species_from_json(value: object) -> Dict[str, Species]:
    if not isinstance(value, Mapping):
        raise ValueError(f"'species' must be an object of name -> parameters, got {type(value).__name__}")
    species = {}
    for name, params in value.items():
        if isinstance(params, Species):
            species[name] = params
            continue
        if not isinstance(params, Mapping):
            raise ValueError(f"Invalid parameters for species {name!r}: {params}")
        species[name] = Species.from_dict(name, params)
    return species


def load_config(path: str | Path) -> WorldConfig:
    with open(Path(path), "r", encoding="utf-8") as f:
        data = json.load(f)
    cfg = WorldConfig()
    for field_info in fields(WorldConfig):
        name = field_info.name
        if name not in data:
            continue
        value = data[name]
        if name == "species":
            value = _species_from_json(value)
        elif name == "creation_probabilities":
            value = {key: float(prob) for key, prob in value.items()}
        setattr(cfg, name, value)
    return cfg.validate()


def build_config(overrides: Optional[Dict[str, object]] = None, path: str | Path | None = None) -> WorldConfig:
    config_path = Path(path) if path is not None else CONFIG_PATH
    if config_path.exists():
        cfg = load_config(config_path)
    elif path is not None:
        raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        cfg = WorldConfig()
    if overrides:
        for key, value in overrides.items():
            if not hasattr(cfg, key):
                raise ValueError(f"Unknown WorldConfig field: {key}")
            if key == "species":
                value = _species_from_json(value)
            setattr(cfg, key, value)
    return cfg.validate()
