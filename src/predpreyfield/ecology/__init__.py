from predpreyfield.ecology.location import Location
from predpreyfield.ecology.field import Field
from predpreyfield.ecology.species import Species, default_species
from predpreyfield.ecology.organism import Organism
from predpreyfield.ecology.engine import Simulator, TickReport, step_generation
from predpreyfield.ecology.config import WorldConfig, build_config, load_config

__all__ = [
    "Field",
    "Location",
    "Organism",
    "Simulator",
    "Species",
    "TickReport",
    "WorldConfig",
    "build_config",
    "default_species",
    "load_config",
    "step_generation",
]
