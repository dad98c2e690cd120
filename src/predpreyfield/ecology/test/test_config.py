import json

import pytest

from predpreyfield.ecology.config import CONFIG_PATH, WorldConfig, build_config, load_config
from predpreyfield.ecology.species import Species, default_species


def _write(tmp_path, data):
    path = tmp_path / "world.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults_are_valid():
    cfg = WorldConfig().validate()
    assert (cfg.depth, cfg.width) == (80, 120)
    assert list(cfg.species) == ["rabbit", "fox", "tiger"]
    assert cfg.birth_placement == "free"


def test_packaged_config_matches_defaults():
    assert CONFIG_PATH.exists()
    cfg = build_config()
    assert cfg.species == default_species()
    assert cfg.creation_probabilities == WorldConfig().creation_probabilities


def test_load_config_parses_species(tmp_path):
    path = _write(
        tmp_path,
        {
            "depth": 6,
            "width": 7,
            "species": {
                "mouse": {"breeding_age": 1, "max_age": 8, "breeding_probability": 0.4, "max_litter_size": 4},
                "owl": {
                    "breeding_age": 4,
                    "max_age": 40,
                    "breeding_probability": 0.05,
                    "max_litter_size": 2,
                    "food_value": 6,
                    "hunts": ["mouse"],
                },
            },
            "creation_probabilities": {"mouse": 0.2, "owl": 0.05},
            "unused_key": 1,
        },
    )

    cfg = load_config(path)

    assert (cfg.depth, cfg.width) == (6, 7)
    assert isinstance(cfg.species["owl"], Species)
    assert cfg.species["owl"].hunts == ("mouse",)
    assert cfg.species["owl"].is_predator
    assert not cfg.species["mouse"].is_predator


def test_load_config_rejects_unknown_prey(tmp_path):
    path = _write(
        tmp_path,
        {
            "species": {
                "owl": {
                    "breeding_age": 4,
                    "max_age": 40,
                    "breeding_probability": 0.05,
                    "max_litter_size": 2,
                    "food_value": 6,
                    "hunts": ["mouse"],
                }
            },
            "creation_probabilities": {"owl": 0.1},
        },
    )
    with pytest.raises(ValueError):
        load_config(path)


def test_load_config_rejects_incomplete_species(tmp_path):
    path = _write(tmp_path, {"species": {"mouse": {"breeding_age": 1}}, "creation_probabilities": {}})
    with pytest.raises(ValueError, match="missing parameter"):
        load_config(path)


def test_build_config_overrides():
    cfg = build_config({"depth": 5, "width": 9, "shuffle_order": True})
    assert (cfg.depth, cfg.width, cfg.shuffle_order) == (5, 9, True)


def test_build_config_unknown_override():
    with pytest.raises(ValueError, match="Unknown WorldConfig field"):
        build_config({"torus": True})


def test_build_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        build_config(path=tmp_path / "nope.json")


@pytest.mark.parametrize(
    "overrides",
    [
        {"creation_probabilities": {"rabbit": 0.7, "fox": 0.5}},
        {"creation_probabilities": {"rabbit": -0.1}},
        {"creation_probabilities": {"wolf": 0.1}},
        {"birth_placement": "anywhere"},
        {"width": 0},
    ],
)
def test_invalid_overrides_rejected(overrides):
    with pytest.raises(ValueError):
        build_config(overrides)
