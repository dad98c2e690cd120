import logging
import random

import pytest

from predpreyfield.ecology.config import WorldConfig
from predpreyfield.ecology.engine import Simulator, step_generation
from predpreyfield.ecology.field import Field
from predpreyfield.ecology.location import Location
from predpreyfield.ecology.organism import OVERCROWDING, Organism
from predpreyfield.ecology.species import FOX, RABBIT, Species, default_species


def _make_sim(depth, width, seed=0, overrides=None):
    cfg = WorldConfig(depth=depth, width=width, creation_probabilities={})
    if overrides:
        for key, value in overrides.items():
            setattr(cfg, key, value)
    return Simulator(cfg, rng=random.Random(seed))


def _check_field_consistency(field):
    seen = set()
    for location, organism in field.occupied():
        assert organism.alive
        assert organism.location == location
        assert id(organism) not in seen
        seen.add(id(organism))
    assert len(seen) <= field.depth * field.width


def test_single_prey_on_two_cell_field():
    sterile = Species("rabbit", breeding_age=5, max_age=30, breeding_probability=0.0, max_litter_size=5)
    sim = _make_sim(1, 2, overrides={"species": {"rabbit": sterile}})
    rabbit = sim.add(Organism(sterile), Location(0, 0))

    sim.step()

    assert rabbit.alive
    assert rabbit.location in {Location(0, 0), Location(0, 1)}
    assert sim.field.count() == 1
    assert sim.field.occupant_at(rabbit.location) is rabbit


@pytest.mark.parametrize("species", [RABBIT, FOX])
def test_lone_organism_on_single_cell_dies_of_overcrowding(species):
    sim = _make_sim(1, 1)
    organism = sim.add(Organism(species), Location(0, 0))

    report = sim.step()

    assert not organism.alive
    assert organism.death_cause == OVERCROWDING
    assert sim.field.count() == 0
    assert report.deaths[OVERCROWDING] == 1


def test_generation_swap_recycles_stale_buffer():
    sim = _make_sim(3, 3)
    sim.add(Organism(RABBIT), Location(1, 1))
    old_current = sim.field

    sim.step()

    assert sim.field is not old_current
    assert old_current.count() == 0
    assert sim.field.count() == 1
    assert sim.tick == 1


def test_newborns_do_not_act_in_their_birth_tick():
    fertile = Species("rabbit", breeding_age=0, max_age=30, breeding_probability=1.0, max_litter_size=1)
    sim = _make_sim(3, 3, seed=5, overrides={"species": {"rabbit": fertile}})
    parent = sim.add(Organism(fertile), Location(1, 1))

    report = sim.step()

    assert report.births == 1
    ages = sorted(organism.age for organism in sim.organisms())
    assert ages == [0, 1]
    assert parent.age == 1


def test_step_generation_requires_nothing_but_fields_and_rng():
    current, nxt = Field(2, 2), Field(2, 2)
    rabbit = Organism(RABBIT)
    rabbit.set_location(Location(0, 0))
    current.place(rabbit, Location(0, 0))

    report = step_generation(current, nxt, random.Random(1))

    assert report.births == 0
    assert report.total_deaths == 0
    assert nxt.occupants() == [rabbit]
    # the current generation is read, never written
    assert current.occupant_at(Location(0, 0)) is rabbit


class _FullLitterRandom(random.Random):
    def randint(self, a, b):
        return b


def _put(field, organism, row, col):
    organism.set_location(Location(row, col))
    field.place(organism, Location(row, col))
    return organism


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_free_placement_stops_litter_when_no_cell_is_free(seed):
    breeder = Species("vole", breeding_age=0, max_age=30, breeding_probability=1.0, max_litter_size=8)
    current, nxt = Field(3, 3), Field(3, 3)
    parent = _put(current, Organism(breeder), 1, 1)
    blockers = [_put(nxt, Organism(RABBIT), row, col) for row, col in [(0, 0), (0, 1), (0, 2), (1, 0), (1, 2)]]

    report = step_generation(current, nxt, _FullLitterRandom(seed), birth_placement="free")

    assert report.births == 3
    assert not parent.alive and parent.death_cause == OVERCROWDING
    assert all(blocker.alive for blocker in blockers)
    assert nxt.count() == 8
    young = [organism for organism in nxt.occupants() if organism not in blockers]
    assert sorted((o.location.row, o.location.col) for o in young) == [(2, 0), (2, 1), (2, 2)]


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_random_placement_displaces_occupant(seed):
    sterile = Species("rabbit", breeding_age=5, max_age=30, breeding_probability=0.0, max_litter_size=5)
    breeder = Species("vole", breeding_age=0, max_age=30, breeding_probability=1.0, max_litter_size=1)
    current, nxt = Field(1, 3), Field(1, 3)
    # row-major: the rabbit moves into (0, 1) before the vole gives birth there
    rabbit = _put(current, Organism(sterile), 0, 0)
    parent = _put(current, Organism(breeder), 0, 2)

    report = step_generation(current, nxt, random.Random(seed), birth_placement="random")

    assert report.births == 1
    assert not rabbit.alive and rabbit.death_cause == OVERCROWDING
    assert not parent.alive and parent.death_cause == OVERCROWDING
    assert report.deaths[OVERCROWDING] == 2
    assert nxt.count() == 1
    young = nxt.occupant_at(Location(0, 1))
    assert young.species is breeder and young.alive
    _check_field_consistency(nxt)


@pytest.mark.parametrize("birth_placement", ["free", "random"])
@pytest.mark.parametrize("shuffle_order", [False, True])
def test_field_invariants_hold_over_many_ticks(birth_placement, shuffle_order):
    cfg = WorldConfig(
        depth=12,
        width=12,
        creation_probabilities={"rabbit": 0.3, "fox": 0.1, "tiger": 0.05},
        birth_placement=birth_placement,
        shuffle_order=shuffle_order,
    )
    sim = Simulator(cfg, rng=random.Random(2024))
    sim.populate()
    _check_field_consistency(sim.field)

    for _ in range(60):
        before = sim.organisms()
        sim.step()
        _check_field_consistency(sim.field)
        present = {id(organism) for organism in sim.organisms()}
        for organism in before:
            if not organism.alive:
                assert id(organism) not in present


def test_same_seed_reproduces_run():
    def run(seed):
        cfg = WorldConfig(depth=10, width=10, creation_probabilities={"rabbit": 0.2, "fox": 0.05, "tiger": 0.02})
        sim = Simulator(cfg, seed=seed)
        sim.populate()
        snapshots = []
        for _ in range(15):
            sim.step()
            snapshots.append(sorted((view.location.row, view.location.col, view.species, view.age) for view in sim.snapshot()))
        return snapshots

    assert run(17) == run(17)
    assert run(17) != run(18)


def test_populate_follows_creation_probabilities():
    cfg = WorldConfig(depth=4, width=5, creation_probabilities={"rabbit": 1.0, "fox": 0.0, "tiger": 0.0})
    sim = Simulator(cfg, rng=random.Random(3))

    seeded = sim.populate()

    assert seeded == 20
    assert sim.counts() == {"rabbit": 20, "fox": 0, "tiger": 0}
    assert all(0 <= organism.age < RABBIT.max_age for organism in sim.organisms())
    _check_field_consistency(sim.field)


def test_add_rejects_occupied_cell_and_dead_organism():
    sim = _make_sim(2, 2)
    sim.add(Organism(RABBIT), Location(0, 0))
    with pytest.raises(ValueError):
        sim.add(Organism(RABBIT), Location(0, 0))
    corpse = Organism(RABBIT)
    corpse.mark_eaten()
    with pytest.raises(ValueError):
        sim.add(corpse, Location(1, 1))


def test_is_viable_needs_two_species():
    sim = _make_sim(3, 3)
    sim.add(Organism(RABBIT), Location(0, 0))
    assert not sim.is_viable()
    sim.add(Organism(FOX), Location(2, 2))
    assert sim.is_viable()


def test_run_stops_when_callback_returns_false():
    sim = _make_sim(5, 5)
    sim.add(Organism(RABBIT), Location(2, 2))

    reports = sim.run(10, on_tick=lambda s, report: False)

    assert len(reports) == 1
    assert sim.tick == 1


def test_run_stops_when_unviable():
    sim = _make_sim(5, 5)
    sim.add(Organism(RABBIT), Location(0, 0))
    sim.add(Organism(FOX, food_level=1), Location(4, 4))

    reports = sim.run(10, stop_when_unviable=True)

    assert len(reports) == 1
    assert sim.counts()["fox"] == 0


def test_extinction_is_logged(caplog):
    sim = _make_sim(1, 1)
    sim.add(Organism(RABBIT), Location(0, 0))

    with caplog.at_level(logging.WARNING, logger="predpreyfield.ecology.engine"):
        sim.step()

    assert "rabbit went extinct at tick 1" in caplog.text


def test_invalid_config_rejected_by_simulator():
    with pytest.raises(ValueError):
        Simulator(WorldConfig(depth=0, width=5))
    species = default_species()
    del species["rabbit"]
    with pytest.raises(ValueError):
        Simulator(WorldConfig(species=species, creation_probabilities={}))
