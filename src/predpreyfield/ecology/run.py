"""
Run the predator-prey field simulation from the command line.

$ predpreyfield --steps 500 --seed 7
$ predpreyfield --render --cell-size 6
$ predpreyfield --config my_world.json --plot-path /tmp/populations.png
"""
from __future__ import annotations

import argparse
import logging
import random
from typing import Dict, List, Optional

from predpreyfield.ecology.config import WorldConfig, build_config
from predpreyfield.ecology.engine import Simulator
from predpreyfield.ecology.organism import BIRTH_PLACEMENTS
from predpreyfield.ecology.stats import PopulationHistory

logger = logging.getLogger(__name__)

# Defaults for runs without CLI arguments.
RUN_SETTINGS = {
    "steps": 500,
    "log_every": 10,
    "seed": 1,
    "plot_path": None,  # e.g., "/tmp/populations.png"
    "render": False,
    "render_cell_size": 6,
    "render_fps": 20,
}


def setup_logging(level: str = "INFO") -> None:
    """Sets up the logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def run_simulation(
    steps: int = 200,
    log_every: int = 10,
    seed: Optional[int] = 1,
    config: Optional[WorldConfig] = None,
    render: bool = False,
    render_cell_size: int = 6,
    render_fps: int = 20,
    stop_when_unviable: bool = True,
) -> Dict[str, List[float]]:
    cfg = config or WorldConfig()
    simulator = Simulator(cfg, rng=random.Random(seed))
    simulator.populate()
    species_names = list(cfg.species)
    history = PopulationHistory(species_names)
    logger.info("Starting %dx%d field with %s", cfg.depth, cfg.width, simulator.counts())

    renderer = None
    if render:
        try:
            from predpreyfield.ecology.pygame_renderer import PyGameRenderer
        except Exception as exc:
            raise RuntimeError("pygame is required for rendering") from exc
        renderer = PyGameRenderer(cfg.depth, cfg.width, species_names, cell_size=render_cell_size, fps=render_fps)
        renderer.update(simulator.field, simulator.tick, simulator.counts())

    def on_tick(sim: Simulator, report) -> bool:
        history.record(report)
        if renderer:
            return renderer.update(sim.field, report.tick, report.counts)
        return True

    try:
        simulator.run(steps, log_every=log_every, stop_when_unviable=stop_when_unviable, on_tick=on_tick)
    finally:
        if renderer:
            renderer.close()
    logger.info("Finished after %d ticks: %s (peaks %s)", simulator.tick, simulator.counts(), history.peaks())
    return history.data


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Grid-based predator-prey population simulation")
    ap.add_argument("--steps", type=int, default=RUN_SETTINGS["steps"])
    ap.add_argument("--seed", type=int, default=RUN_SETTINGS["seed"])
    ap.add_argument("--config", type=str, default=None, help="JSON file with WorldConfig fields")
    ap.add_argument("--depth", type=int, default=None)
    ap.add_argument("--width", type=int, default=None)
    ap.add_argument("--log-every", type=int, default=RUN_SETTINGS["log_every"])
    ap.add_argument("--birth-placement", choices=BIRTH_PLACEMENTS, default=None)
    ap.add_argument("--shuffle-order", action="store_true", default=None)
    ap.add_argument("--render", action="store_true", default=RUN_SETTINGS["render"], help="live pygame view")
    ap.add_argument("--cell-size", type=int, default=RUN_SETTINGS["render_cell_size"])
    ap.add_argument("--fps", type=int, default=RUN_SETTINGS["render_fps"])
    ap.add_argument("--plot-path", type=str, default=RUN_SETTINGS["plot_path"])
    ap.add_argument("--keep-going", action="store_true", help="do not stop when fewer than two species remain")
    ap.add_argument("--log-level", type=str, default="INFO")
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_level)

    overrides = {}
    for key in ("depth", "width", "birth_placement", "shuffle_order"):
        value = getattr(args, key)
        if value is not None:
            overrides[key] = value
    cfg = build_config(overrides, path=args.config)

    history = run_simulation(
        steps=args.steps,
        log_every=args.log_every,
        seed=args.seed,
        config=cfg,
        render=args.render,
        render_cell_size=args.cell_size,
        render_fps=args.fps,
        stop_when_unviable=not args.keep_going,
    )
    if args.plot_path:
        from predpreyfield.ecology.plotting import plot_history

        plot_history(history, args.plot_path)
        logger.info("Population plot written to %s", args.plot_path)


if __name__ == "__main__":
    main()
