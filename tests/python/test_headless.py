import csv
import json

import pytest

from flotilla.app.headless import run_headless
from flotilla.checkpoints import read_checkpoint
from flotilla.config import SimulationConfig


def _read_csv(path):
    with path.open(newline="") as handle:
        return list(csv.reader(handle))


def _short_config() -> SimulationConfig:
    return SimulationConfig(time_step=0.25, episode_duration=0.5)


def test_headless_log_header_and_rows(tmp_path):
    log_path = tmp_path / "generations.csv"
    history = run_headless(steps=6, seed=1, log_path=log_path, config=_short_config())
    rows = _read_csv(log_path)

    assert rows[0] == [
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
    # ticks 3 and 6 end an episode, three species each
    assert len(rows) == 1 + 6
    assert len(history) == 6
    idx = {name: i for i, name in enumerate(rows[0])}
    assert [row[idx["species"]] for row in rows[1:4]] == ["boat", "pirate", "police"]
    assert {row[idx["generation"]] for row in rows[1:4]} == {"1"}
    assert {row[idx["generation"]] for row in rows[4:]} == {"2"}
    for row, entry in zip(rows[1:], history):
        assert float(row[idx["winner_points"]]) == pytest.approx(entry.winner_points, abs=1e-4)
        assert int(row[idx["winner_ray_radius"]]) == entry.winner_ray_radius


def test_headless_is_deterministic_per_seed(tmp_path):
    first = tmp_path / "a.csv"
    second = tmp_path / "b.csv"
    run_headless(steps=6, seed=4, log_path=first, config=_short_config())
    run_headless(steps=6, seed=4, log_path=second, config=_short_config())
    assert _read_csv(first) == _read_csv(second)


def test_headless_summary_output(tmp_path):
    summary_path = tmp_path / "summary.json"
    run_headless(steps=6, seed=3, log_path=None, summary_path=summary_path, config=_short_config())

    payload = json.loads(summary_path.read_text())
    assert payload["steps"] == 6
    assert payload["seed"] == 3
    assert payload["generation"] == 2
    assert set(payload["species"]) == {"boat", "pirate", "police"}
    assert payload["species"]["boat"]["generations"] == 2


def test_headless_reads_yaml_and_writes_checkpoints(tmp_path):
    config_path = tmp_path / "run.yaml"
    config_path.write_text("time_step: 0.25\nepisode_duration: 0.25\n")
    checkpoint_dir = tmp_path / "winners"

    run_headless(steps=2, seed=None, log_path=None, config_path=config_path, checkpoint_dir=checkpoint_dir)

    assert (checkpoint_dir / "boat-Gen-1.yaml").exists()


def test_headless_seeds_species_from_checkpoint(tmp_path):
    checkpoint_dir = tmp_path / "winners"
    run_headless(steps=3, seed=1, log_path=None, checkpoint_dir=checkpoint_dir, config=_short_config())
    seed_path = checkpoint_dir / "pirate-Gen-1.yaml"
    _, seeded = read_checkpoint(seed_path)

    config = _short_config()
    config.evolution.mutation_chance = 0.0
    history = run_headless(steps=3, seed=1, log_path=None, config=config, seed_genomes=[seed_path])

    assert config.species_named("pirate").genome == seeded
    pirate_metrics = [entry for entry in history if entry.species == "pirate"]
    assert pirate_metrics[0].winner_sight == pytest.approx(seeded.sight)
