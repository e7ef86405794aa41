# Simulation error types
from typing import Optional


class SimulationError(Exception):
    """Terminal failure of a run. Context is folded into the message."""

    def __init__(self, message: str, time: Optional[int] = None, pid: Optional[int] = None,
                 device: Optional[str] = None):
        self.time = time
        self.pid = pid
        self.device = device
        context = []
        if time is not None:
            context.append(f"t={time}")
        if pid is not None:
            context.append(f"pid={pid}")
        if device is not None:
            context.append(f"device={device}")
        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)


class ConfigurationError(SimulationError):
    pass


class SimulationLimitExceeded(SimulationError):
    pass
