"""
Generation driver: one tick moves every live organism of the current field
into the next field, then the two buffers are swapped.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
import logging
import random

from predpreyfield.ecology.config import WorldConfig
from predpreyfield.ecology.field import Field
from predpreyfield.ecology.location import Location
from predpreyfield.ecology.organism import DEATH_CAUSES, FREE, Organism, OrganismView

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    tick: int = 0
    births: int = 0
    deaths: Dict[str, int] = field(default_factory=lambda: {cause: 0 for cause in DEATH_CAUSES})
    counts: Dict[str, int] = field(default_factory=dict)

    @property
    def total_deaths(self) -> int:
        return sum(self.deaths.values())


def step_generation(
    current: Field,
    next_field: Field,
    rng: random.Random,
    birth_placement: str = FREE,
    shuffle_order: bool = False,
) -> TickReport:
    """
    Let every organism alive in `current` act once, writing into `next_field`.
    `next_field` must be empty on entry; swapping is left to the caller.
    """
    actors: List[Organism] = [organism for organism in current.occupants() if organism.alive]
    if shuffle_order:
        rng.shuffle(actors)

    newborns: List[Organism] = []
    for organism in actors:
        # may already have been eaten earlier this tick
        if organism.alive:
            organism.act(current, next_field, newborns, rng, birth_placement)

    for young in newborns:
        if young.alive:
            next_field.place(young, young.location)

    report = TickReport(births=len(newborns))
    for organism in actors + newborns:
        if not organism.alive:
            report.deaths[organism.death_cause] += 1
    return report


class Simulator:
    """Owns the current/next Field pair and advances them tick by tick."""

    def __init__(
        self,
        config: Optional[WorldConfig] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ):
        self.config = (config or WorldConfig()).validate()
        self.rng = rng if rng is not None else random.Random(seed)
        self.field = Field(self.config.depth, self.config.width)
        self._next_field = Field(self.config.depth, self.config.width)
        self.tick = 0

    def reset(self) -> None:
        self.field.clear()
        self._next_field.clear()
        self.tick = 0

    def populate(self) -> int:
        """Seed the field from the configured creation probabilities."""
        self.reset()
        thresholds = []
        cumulative = 0.0
        for name, probability in self.config.creation_probabilities.items():
            cumulative += probability
            thresholds.append((cumulative, self.config.species[name]))

        seeded = 0
        for location in self.field.locations():
            roll = self.rng.random()
            for threshold, species in thresholds:
                if roll < threshold:
                    organism = Organism.create(species, self.rng, start_with_random_age=True)
                    self.add(organism, location)
                    seeded += 1
                    break
        logger.debug("Seeded %d organisms on a %dx%d field: %s", seeded, self.field.depth, self.field.width, self.counts())
        return seeded

    def add(self, organism: Organism, location: Location) -> Organism:
        if not organism.alive:
            raise ValueError("Cannot place a dead organism")
        if organism.species.name not in self.config.species:
            raise ValueError(f"Unknown species {organism.species.name!r}")
        if not self.field.is_free(location):
            raise ValueError(f"Location {location} is already occupied")
        organism.set_location(location)
        self.field.place(organism, location)
        return organism

    def step(self) -> TickReport:
        before = self.counts()
        report = step_generation(
            self.field,
            self._next_field,
            self.rng,
            birth_placement=self.config.birth_placement,
            shuffle_order=self.config.shuffle_order,
        )
        self.field, self._next_field = self._next_field, self.field
        self._next_field.clear()
        self.tick += 1

        report.tick = self.tick
        report.counts = self.counts()
        for name, count in before.items():
            if count > 0 and report.counts[name] == 0:
                logger.warning("%s went extinct at tick %d", name, self.tick)
        return report

    def run(
        self,
        steps: int,
        log_every: int = 0,
        stop_when_unviable: bool = False,
        on_tick: Optional[Callable[["Simulator", TickReport], bool]] = None,
    ) -> List[TickReport]:
        """
        Advance up to `steps` ticks. `on_tick` is called after every tick and
        may return False to stop early.
        """
        reports = []
        for step_idx in range(steps):
            report = self.step()
            reports.append(report)
            if log_every > 0 and (step_idx % log_every == 0 or step_idx == steps - 1):
                populations = " ".join(f"{name}={count}" for name, count in report.counts.items())
                logger.info(
                    "t=%04d %s births=%d deaths=%d", report.tick, populations, report.births, report.total_deaths
                )
            if on_tick is not None and on_tick(self, report) is False:
                break
            if stop_when_unviable and not self.is_viable():
                logger.info("Population no longer viable at tick %d", self.tick)
                break
        return reports

    def organisms(self) -> List[Organism]:
        return self.field.occupants()

    def snapshot(self) -> List[OrganismView]:
        return [organism.view() for organism in self.field.occupants()]

    def counts(self) -> Dict[str, int]:
        counts = {name: 0 for name in self.config.species}
        for organism in self.field.occupants():
            counts[organism.species.name] += 1
        return counts

    def is_viable(self) -> bool:
        """At least two species are still present."""
        return sum(1 for count in self.counts().values() if count > 0) >= 2
