from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from loguru import logger

from ..checkpoints import YamlCheckpointSink, checkpoint_species, read_checkpoint
from ..config import SimulationConfig
from ..sim.core.simulation import Simulation
from ..sim.types.metrics import GenerationMetrics

_HEADER = [
    "generation",
    "species",
    "survivors",
    "winner_points",
    "mean_points",
    "parent_count",
    "winner_sight",
    "winner_speed",
    "winner_ray_radius",
]


def _format_row(metrics: GenerationMetrics) -> list[object]:
    return [
        metrics.generation,
        metrics.species,
        metrics.survivors,
        f"{metrics.winner_points:.4f}",
        f"{metrics.mean_points:.4f}",
        metrics.parent_count,
        f"{metrics.winner_sight:.4f}",
        f"{metrics.winner_speed:.4f}",
        metrics.winner_ray_radius,
    ]


def _species_summary(history: List[GenerationMetrics]) -> Dict[str, Dict[str, float]]:
    summary: Dict[str, Dict[str, float]] = {}
    for entry in history:
        stats = summary.setdefault(
            entry.species,
            {"generations": 0, "best_winner_points": entry.winner_points, "last_winner_points": 0.0},
        )
        stats["generations"] += 1
        stats["best_winner_points"] = max(stats["best_winner_points"], entry.winner_points)
        stats["last_winner_points"] = entry.winner_points
    return summary


def _seed_species_genome(config: SimulationConfig, path: Path) -> None:
    label, genome = read_checkpoint(path)
    species = config.species_named(checkpoint_species(label))
    species.genome = genome
    logger.info(f"[headless] Seeded {species.name} from {label}")


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    config_path: Optional[Path] = None,
    checkpoint_dir: Optional[Path] = None,
    summary_path: Optional[Path] = None,
    config: Optional[SimulationConfig] = None,
    seed_genomes: Sequence[Path] = (),
) -> List[GenerationMetrics]:
    if config is None:
        config = SimulationConfig.from_yaml(config_path) if config_path else SimulationConfig()
    if seed is not None:
        config.seed = seed
    for path in seed_genomes:
        _seed_species_genome(config, path)
    checkpoints = YamlCheckpointSink(checkpoint_dir) if checkpoint_dir else None
    simulation = Simulation(config, checkpoints=checkpoints)

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    try:
        simulation.clock.start()
        for _ in range(steps):
            for metrics in simulation.step():
                if writer:
                    writer.writerow(_format_row(metrics))
        simulation.clock.stop()
    finally:
        if csv_file:
            csv_file.close()

    history = simulation.clock.history
    logger.info(f"[headless] Ran {steps} ticks, reached generation {simulation.clock.generation}")
    if summary_path:
        summary = {
            "steps": steps,
            "seed": config.seed,
            "generation": simulation.clock.generation,
            "species": _species_summary(history),
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))
    return history


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless flotilla evolution run")
    parser.add_argument("--steps", type=int, default=15000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML simulation config")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write generation metrics")
    parser.add_argument(
        "--checkpoints",
        type=Path,
        default=None,
        help="Directory to save each generation's winner genomes.",
    )
    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Optional JSON file to write summary stats for the run.",
    )
    parser.add_argument(
        "--seed-genome",
        type=Path,
        action="append",
        default=[],
        help="Winner checkpoint to use as its species' starting genome; repeatable.",
    )
    args = parser.parse_args()
    run_headless(
        args.steps,
        args.seed,
        args.log,
        config_path=args.config,
        checkpoint_dir=args.checkpoints,
        summary_path=args.summary,
        seed_genomes=args.seed_genome,
    )


if __name__ == "__main__":
    main()
