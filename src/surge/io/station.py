"""Stations: time series of the state at fixed grid cells."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

if TYPE_CHECKING:
    from surge.patches.base import WavePropagation

STATION_COLUMNS = ("time", "height", "momentum_x", "momentum_y")


class StationRecord(NamedTuple):
    time: float
    height: float
    momentum_x: float
    momentum_y: float


@dataclass
class Station:
    """A named interior cell sampled every ``interval`` simulated seconds."""

    name: str
    ix: int
    iy: int = 0
    interval: float = 1.0
    next_record_time: float = 0.0
    records: list[StationRecord] = field(default_factory=list)

    @classmethod
    def at_position(cls, name: str, x: float, y: float, cell_size: float, interval: float) -> "Station":
        """Station in the cell containing (x, y) meters."""
        return cls(name=name, ix=int(x // cell_size), iy=int(y // cell_size), interval=interval)

    @property
    def filename(self) -> str:
        return f"station_{self.name}.csv"

    def needs_update(self, time: float) -> bool:
        return time >= self.next_record_time

    def record_state(self, patch: "WavePropagation", time: float) -> StationRecord:
        """Append the current (h, hu, hv) of the station cell."""
        record = StationRecord(time, *patch.cell_state(self.ix, self.iy))
        self.records.append(record)
        while self.next_record_time <= time:
            self.next_record_time += self.interval
        return record

    def as_array(self) -> np.ndarray:
        return np.asarray(self.records, dtype=float).reshape(-1, len(STATION_COLUMNS))

    def write(self, directory: Path | str) -> Path:
        """Write ``station_<name>.csv`` into ``directory``."""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.filename
        with open(path, "w") as f:
            f.write(f"# Station {self.name} at cell ({self.ix}, {self.iy})\n")
            np.savetxt(
                f,
                self.as_array(),
                delimiter=",",
                header=",".join(STATION_COLUMNS),
                comments="",
                fmt="%.10g",
            )
        return path
