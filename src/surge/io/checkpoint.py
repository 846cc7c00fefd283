"""Checkpoints: full grid state plus run metadata in one .npz file.

Ghost layers are stored as data, so a restored patch continues exactly
where the saved one stopped without re-evaluating any setup.
"""

import json
import logging
from pathlib import Path

import numpy as np
from pydantic import BaseModel, ValidationError

from surge.core.exceptions import CheckpointError
from surge.io.station import Station, StationRecord
from surge.patches.base import WavePropagation
from surge.patches.wave_propagation_1d import WavePropagation1d
from surge.patches.wave_propagation_2d import WavePropagation2d
from surge.solvers.riemann import SolverKind

logger = logging.getLogger(__name__)


class RunState(BaseModel):
    """Run progress needed to resume a simulation."""

    cell_size_meters: float
    cfl_factor: float
    simulation_time: float = 0.0
    time_step_index: int = 0
    solver: SolverKind = SolverKind.FWAVE

    # Setup the run started from; None when unknown
    setup: str | None = None

    # Frame schedule, kept so a resumed run continues the numbering
    expected_steps: int | None = None
    last_frame: int = -1


def save_checkpoint(
    path: Path | str,
    patch: WavePropagation,
    run_state: RunState,
    stations: list[Station] | tuple[Station, ...] = (),
) -> Path:
    """Write the active slot of ``patch`` with run state and station records."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    arrays = {name: np.asarray(q) for name, q in patch.raw_arrays().items()}
    meta = {
        "run_state": run_state.model_dump(mode="json"),
        "stations": [
            {
                "name": s.name,
                "ix": s.ix,
                "iy": s.iy,
                "interval": s.interval,
                "next_record_time": s.next_record_time,
            }
            for s in stations
        ],
    }
    for i, station in enumerate(stations):
        arrays[f"station_{i}"] = station.as_array()

    tmp_path = path.with_name(path.name + ".tmp")
    with open(tmp_path, "wb") as f:
        np.savez(f, meta=np.array(json.dumps(meta)), **arrays)
    tmp_path.replace(path)

    logger.info("Checkpoint written: %s (t = %.4f s)", path, run_state.simulation_time)
    return path


def load_checkpoint(path: Path | str) -> tuple[WavePropagation, RunState, list[Station]]:
    """Restore a patch, its run state and its stations.

    Raises:
        CheckpointError: If the file is missing, incomplete or inconsistent.
    """
    path = Path(path)
    if not path.exists():
        raise CheckpointError(f"Checkpoint not found: {path}")

    try:
        with np.load(path, allow_pickle=False) as data:
            contents = {name: data[name] for name in data.files}
    except (OSError, ValueError) as exc:
        raise CheckpointError(f"Unreadable checkpoint {path}: {exc}") from exc

    missing = {"meta", "h", "hu", "b"} - set(contents)
    if missing:
        raise CheckpointError(f"Checkpoint {path} lacks: {', '.join(sorted(missing))}")

    try:
        meta = json.loads(str(contents["meta"]))
        run_state = RunState.model_validate(meta["run_state"])
    except (json.JSONDecodeError, KeyError, ValidationError) as exc:
        raise CheckpointError(f"Checkpoint {path} has invalid metadata: {exc}") from exc

    h, hu, b = contents["h"], contents["hu"], contents["b"]
    try:
        if "hv" in contents:
            patch = WavePropagation2d.from_arrays(
                h, hu, contents["hv"], b, solver=run_state.solver, cfl_factor=run_state.cfl_factor
            )
        else:
            patch = WavePropagation1d.from_arrays(
                h, hu, b, solver=run_state.solver, cfl_factor=run_state.cfl_factor
            )
    except ValueError as exc:
        raise CheckpointError(f"Checkpoint {path} holds inconsistent arrays: {exc}") from exc

    stations = []
    for i, info in enumerate(meta.get("stations", [])):
        records = contents.get(f"station_{i}", np.zeros((0, 4)))
        stations.append(
            Station(
                name=info["name"],
                ix=info["ix"],
                iy=info["iy"],
                interval=info["interval"],
                next_record_time=info["next_record_time"],
                records=[StationRecord(*map(float, row)) for row in records],
            )
        )

    logger.info(
        "Checkpoint restored: %s (t = %.4f s, step %d)",
        path,
        run_state.simulation_time,
        run_state.time_step_index,
    )
    return patch, run_state, stations
