"""Exceptions raised by the wave propagation system."""


class SurgeError(Exception):
    """Base exception for all surge errors."""

    pass


class ConfigurationError(SurgeError):
    """Raised when settings, setup parameters or input data are invalid."""

    pass


class NumericalBreakdownError(SurgeError):
    """Raised when no finite stable time step can be computed."""

    def __init__(self, max_timestep: float, message: str | None = None):
        self.max_timestep = max_timestep
        super().__init__(
            message or f"No finite stable time step (got {max_timestep})"
        )


class CheckpointError(SurgeError):
    """Raised when a checkpoint cannot be written, read or is inconsistent."""

    pass
