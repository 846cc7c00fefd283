"""CSV frame output and column input."""

from pathlib import Path

import numpy as np

from surge.core.exceptions import ConfigurationError
from surge.core.types import ArrayLike


def write_frame(
    path: Path | str,
    cell_size: float,
    height: ArrayLike | None = None,
    momentum_x: ArrayLike | None = None,
    momentum_y: ArrayLike | None = None,
    bathymetry: ArrayLike | None = None,
    stride: int = 1,
) -> Path:
    """Write interior cell values as one CSV row per cell.

    Columns are ``x,y`` followed by every quantity passed, in the order
    height, momentum_x, momentum_y, bathymetry. Coordinates are cell
    centres (i + 0.5)·Δx; y is 0 for a single row of cells.

    Args:
        path: Output file
        cell_size: Δx = Δy in meters
        height, momentum_x, momentum_y, bathymetry: Interior arrays of
            shape (nx,) or (ny, nx)
        stride: Write every n-th cell along each axis

    Returns:
        The path written.
    """
    named = [
        (name, np.atleast_2d(np.asarray(values)))
        for name, values in (
            ("height", height),
            ("momentum_x", momentum_x),
            ("momentum_y", momentum_y),
            ("bathymetry", bathymetry),
        )
        if values is not None
    ]
    if not named:
        raise ValueError("write_frame needs at least one quantity")

    ny, nx = named[0][1].shape
    x = (np.arange(nx) + 0.5) * cell_size
    y = (np.arange(ny) + 0.5) * cell_size if ny > 1 else np.zeros(1)
    xx, yy = np.meshgrid(x, y)

    columns = [xx, yy] + [values for _, values in named]
    table = np.column_stack([c[::stride, ::stride].ravel() for c in columns])

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    header = ",".join(["x", "y"] + [name for name, _ in named])
    np.savetxt(path, table, delimiter=",", header=header, comments="", fmt="%.10g")
    return path


def read_columns(path: Path | str) -> dict[str, np.ndarray]:
    """Read a headed CSV into ``{column: values}``, skipping ``#`` comment lines."""
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"CSV file not found: {path}")

    with open(path) as f:
        lines = [line for line in f if line.strip() and not line.lstrip().startswith("#")]
    if len(lines) < 2:
        raise ConfigurationError(f"{path} holds no data rows")

    data = np.genfromtxt(lines, delimiter=",", names=True, dtype=float, encoding=None)
    return {name: np.atleast_1d(data[name]) for name in data.dtype.names}
