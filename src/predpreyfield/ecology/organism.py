"""
Organism life cycle and per-tick behaviour.

Every organism is the same record type; what it does in a tick is looked up
in BEHAVIOURS by its species role. Each update reads the current generation
and writes its outcome (move, births, death) into the next one, so nothing
an organism does this tick is visible to the others until the generations
are swapped.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

from predpreyfield.ecology.field import Field
from predpreyfield.ecology.location import Location
from predpreyfield.ecology.species import PREDATOR, PREY, Species

OLD_AGE = "old_age"
STARVATION = "starvation"
OVERCROWDING = "overcrowding"
EATEN = "eaten"
DEATH_CAUSES = (OLD_AGE, STARVATION, OVERCROWDING, EATEN)

# Birth placement modes
FREE = "free"  # newborns only land on free cells; surplus litter is lost
RANDOM = "random"  # newborns land on any neighbour and displace what is there
BIRTH_PLACEMENTS = (FREE, RANDOM)


class OrganismView(NamedTuple):
    location: Optional[Location]
    species: str
    age: int
    alive: bool


@dataclass(eq=False)
class Organism:
    species: Species
    age: int = 0
    alive: bool = True
    location: Optional[Location] = None
    food_level: Optional[int] = None
    death_cause: Optional[str] = None

    def __post_init__(self):
        if self.age < 0:
            raise ValueError(f"age must be >= 0, got {self.age}")
        if self.species.is_predator and self.food_level is None:
            self.food_level = self.species.food_value

    @classmethod
    def create(cls, species: Species, rng: random.Random, start_with_random_age: bool = False) -> "Organism":
        """
        A newborn (age 0, fully fed), or with start_with_random_age a member
        of the initial population with a random age and food level.
        """
        if not start_with_random_age:
            return cls(species)
        age = rng.randrange(species.max_age) if species.max_age > 0 else 0
        food_level = rng.randrange(species.food_value) if species.is_predator else None
        return cls(species, age=age, food_level=food_level)

    def view(self) -> OrganismView:
        return OrganismView(self.location, self.species.name, self.age, self.alive)

    # ---- life cycle ----

    def kill(self, cause: str = EATEN) -> None:
        if self.alive:
            self.alive = False
            self.death_cause = cause

    def mark_eaten(self) -> None:
        self.kill(EATEN)

    def set_location(self, location: Location) -> None:
        self.location = location

    def increment_age(self) -> None:
        self.age += 1
        if self.age > self.species.max_age:
            self.kill(OLD_AGE)

    def increment_hunger(self) -> None:
        if self.food_level is None:
            return
        self.food_level -= 1
        if self.food_level <= 0:
            self.kill(STARVATION)

    def can_breed(self) -> bool:
        return self.age >= self.species.breeding_age

    def breed(self, rng: random.Random) -> int:
        """Litter size for this tick, 0 when too young or the breeding roll fails."""
        if self.can_breed() and rng.random() < self.species.breeding_probability:
            return rng.randint(1, self.species.max_litter_size)
        return 0

    # ---- per-tick update ----

    def act(
        self,
        current_field: Field,
        next_field: Field,
        newborns: List["Organism"],
        rng: random.Random,
        birth_placement: str = FREE,
    ) -> None:
        if not self.alive:
            return
        BEHAVIOURS[self.species.role](self, current_field, next_field, newborns, rng, birth_placement)

    def find_food(
        self, current_field: Field, next_field: Field, rng: random.Random
    ) -> Tuple[bool, Optional[Location]]:
        """
        Eat the first live organism of a hunted species found next to us.
        Returns (ate, destination); destination is None when nothing was
        eaten or no cell is left to move into.
        """
        for where in current_field.adjacent_locations(self.location, rng):
            other = current_field.occupant_at(where)
            if other is None or not other.alive:
                continue
            if other.species.name not in self.species.hunts:
                continue
            # It has already acted this tick and left this cell.
            if other.location != where:
                continue
            other.mark_eaten()
            self.food_level = self.species.food_value
            if next_field.is_free(where):
                return True, where
            return True, next_field.free_adjacent_location(self.location, rng)
        return False, None


def _give_birth(
    parent: Organism, next_field: Field, newborns: List[Organism], rng: random.Random, birth_placement: str
) -> None:
    births = parent.breed(rng)
    if births and birth_placement == RANDOM and not next_field.neighbours(parent.location):
        return
    for _ in range(births):
        if birth_placement == FREE:
            where = next_field.free_adjacent_location(parent.location, rng)
            if where is None:
                return
        else:
            where = next_field.random_adjacent_location(parent.location, rng)
        young = Organism(parent.species, food_level=parent.food_level)
        young.set_location(where)
        displaced = next_field.place(young, where)
        if displaced is not None:
            displaced.kill(OVERCROWDING)
        newborns.append(young)


def _move_to(organism: Organism, next_field: Field, destination: Optional[Location]) -> None:
    if destination is None:
        # can neither move nor stay
        organism.kill(OVERCROWDING)
        return
    organism.set_location(destination)
    next_field.place(organism, destination)


def act_prey(
    organism: Organism,
    current_field: Field,
    next_field: Field,
    newborns: List[Organism],
    rng: random.Random,
    birth_placement: str,
) -> None:
    organism.increment_age()
    if not organism.alive:
        return
    _give_birth(organism, next_field, newborns, rng, birth_placement)
    _move_to(organism, next_field, next_field.free_adjacent_location(organism.location, rng))


def act_predator(
    organism: Organism,
    current_field: Field,
    next_field: Field,
    newborns: List[Organism],
    rng: random.Random,
    birth_placement: str,
) -> None:
    organism.increment_age()
    organism.increment_hunger()
    if not organism.alive:
        return
    _give_birth(organism, next_field, newborns, rng, birth_placement)
    ate, destination = organism.find_food(current_field, next_field, rng)
    if not ate:
        destination = next_field.free_adjacent_location(organism.location, rng)
    _move_to(organism, next_field, destination)


Behaviour = Callable[[Organism, Field, Field, List[Organism], random.Random, str], None]

BEHAVIOURS: Dict[str, Behaviour] = {
    PREY: act_prey,
    PREDATOR: act_predator,
}
