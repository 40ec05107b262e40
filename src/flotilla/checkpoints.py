from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from .config import CategoryWeightsConfig, GenomeConfig
from .exceptions import CheckpointError
from .sim.core.genome import Genome


class YamlCheckpointSink:
    """Writes winner genomes as ``<label>.yaml`` files under ``directory``."""

    def __init__(self, directory: Path | str):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def save_checkpoint(self, genome: Genome, label: str) -> None:
        payload: Dict[str, Any] = {"label": label, "genome": genome.to_dict()}
        path = self._directory / f"{label}.yaml"
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            path.write_text(yaml.safe_dump(payload, sort_keys=False))
        except (OSError, yaml.YAMLError) as exc:
            raise CheckpointError(f"failed to write {path}: {exc}") from exc


def read_checkpoint(path: Path | str) -> Tuple[str, GenomeConfig]:
    """Return the label and genome stored in a checkpoint file."""
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text())
        raw = data["genome"]
        config = GenomeConfig(
            ray_radius=int(raw["ray_radius"]),
            sight=float(raw["sight"]),
            moving_speed=float(raw["moving_speed"]),
            random_direction_value=(
                float(raw["random_direction_value"][0]),
                float(raw["random_direction_value"][1]),
            ),
            weights={tag: CategoryWeightsConfig(**pair) for tag, pair in raw.get("weights", {}).items()},
        )
        label = str(data.get("label", path.stem))
    except (OSError, yaml.YAMLError, KeyError, IndexError, TypeError, ValueError) as exc:
        raise CheckpointError(f"failed to read {path}: {exc}") from exc
    return label, config


def load_checkpoint(path: Path | str) -> Genome:
    return Genome.from_config(read_checkpoint(path)[1])


def checkpoint_species(label: str) -> str:
    # labels look like "<species>-Gen-<generation>"
    return label.rsplit("-Gen-", 1)[0]
