import math
from dataclasses import dataclass
from typing import Sequence

from core.errors import ConfigurationError


DEFAULT_MAX_TIME = 1_000_000  # safety cap on the simulation clock
GLOBAL_PAGE_STRIDE = 10000    # pid * stride + page keeps pages of different processes apart


@dataclass(frozen=True)
class SimulationConfig:
    algorithm: str
    quantum: int
    memory_policy: str
    memory_size: int
    page_size: int
    allocation_percentage: float
    device_count: int

    @property
    def is_local_policy(self) -> bool:
        return self.memory_policy.strip().lower() == 'local'

    def validate(self, devices: Sequence = (), processes: Sequence = ()) -> None:
        """Refuse inputs the simulation cannot run on."""
        if self.quantum <= 0:
            raise ConfigurationError(f"quantum must be positive, got {self.quantum}")
        if self.device_count != len(devices):
            raise ConfigurationError(
                f"{self.device_count} devices declared but {len(devices)} given")
        if not math.isfinite(self.allocation_percentage) or self.allocation_percentage < 0:
            raise ConfigurationError(
                f"allocation percentage must be a finite non-negative number, got {self.allocation_percentage}")

        names = set()
        for d in devices:
            if d.capacity < 1:
                raise ConfigurationError("device capacity must be at least 1", device=d.name)
            if d.operation_time < 0:
                raise ConfigurationError("device operation time must not be negative", device=d.name)
            if d.name in names:
                raise ConfigurationError("duplicate device name", device=d.name)
            names.add(d.name)

        pids = set()
        for p in processes:
            if p.pid in pids:
                raise ConfigurationError("duplicate pid", pid=p.pid)
            pids.add(p.pid)
            if p.creation_time < 0 or p.execution_time < 0:
                raise ConfigurationError("creation and execution time must not be negative", pid=p.pid)
            if not 0 <= p.io_chance <= 100:
                raise ConfigurationError(f"io chance {p.io_chance} outside 0..100", pid=p.pid)
            if p.page_sequence and self.page_size <= 0:
                raise ConfigurationError(
                    f"page size must be positive, got {self.page_size}", pid=p.pid)
            if not self.is_local_policy:
                for page in p.page_sequence:
                    if not 0 <= page < GLOBAL_PAGE_STRIDE:
                        raise ConfigurationError(
                            f"page {page} outside 0..{GLOBAL_PAGE_STRIDE - 1} under global policy",
                            pid=p.pid)
