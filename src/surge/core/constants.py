"""Physical and numerical constants."""

# Gravitational acceleration (m/s²), standard gravity
GRAVITY = 9.80665

# A cell is dry (land) when its bathymetry is strictly above this level (m)
DRY_BATHYMETRY_LEVEL = 0.0

# Default Courant factors per dimension
DEFAULT_CFL_1D = 0.5
DEFAULT_CFL_2D = 0.45

# Cell count above which per-step kernel timing is logged at DEBUG
TIMING_LOG_CELL_THRESHOLD = 100_000

# Defaults for the tsunami event setups
SHORE_CLIFF_HEIGHT = 20.0  # Minimum |bathymetry| near the shore line (m)
TSUNAMI_1D_DISPLACEMENT = -10.0  # Seafloor displacement amplitude (m)
TSUNAMI_1D_DISPLACEMENT_START = 175_000.0  # Along-track start of uplift (m)
TSUNAMI_1D_DISPLACEMENT_END = 250_000.0  # Along-track end of uplift (m)
