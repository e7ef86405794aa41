"""
Page replacement model.

Runs after the CPU simulation over the same process set and reports how many
page replacements FIFO performs under a local or global frame allocation.
"""
import logging
import math
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, List, Set

from core.config import GLOBAL_PAGE_STRIDE, SimulationConfig
from core.process import Process

logger = logging.getLogger(__name__)


class PageReplacer(ABC):
    """A bounded frame pool with some eviction discipline."""

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"frame capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self.replacement_count = 0
        self.fault_count = 0

    @abstractmethod
    def access(self, page: int) -> bool:
        """Reference `page`. Returns True on a hit."""

    @abstractmethod
    def resident_pages(self) -> List[int]:
        pass

    def execute(self, sequence: Iterable[int]) -> int:
        for page in sequence:
            self.access(page)
        return self.replacement_count


class FIFOPageTable(PageReplacer):
    def __init__(self, capacity: int):
        super().__init__(capacity)
        self.resident: Set[int] = set()
        self.arrival_order: Deque[int] = deque()

    def access(self, page: int) -> bool:
        if page in self.resident:
            return True
        self.fault_count += 1
        if len(self.resident) >= self.capacity:
            victim = self.arrival_order.popleft()
            self.resident.remove(victim)
            self.replacement_count += 1
        self.resident.add(page)
        self.arrival_order.append(page)
        return False

    def resident_pages(self) -> List[int]:
        # oldest arrival first
        return list(self.arrival_order)


@dataclass
class MemoryReport:
    policy: str
    total_replacements: int = 0
    total_faults: int = 0
    frames: Dict[int, int] = field(default_factory=dict)         # pid -> frames (local)
    replacements: Dict[int, int] = field(default_factory=dict)   # pid -> replacements (local)
    global_frames: int = 0


def local_frame_count(memory_needed: int, page_size: int, allocation_percentage: float) -> int:
    virtual_pages = math.ceil(memory_needed / page_size)
    return max(1, math.floor(virtual_pages * allocation_percentage / 100))


def global_frame_count(memory_size: int, page_size: int) -> int:
    if page_size <= 0:
        return 1
    return max(1, memory_size // page_size)


def encode_global_page(pid: int, page: int) -> int:
    return pid * GLOBAL_PAGE_STRIDE + page


class MemorySimulator:
    def __init__(self, config: SimulationConfig, processes: Iterable[Process]):
        self.config = config
        self.processes = list(processes)

    def run(self) -> MemoryReport:
        if self.config.is_local_policy:
            return self._run_local()
        return self._run_global()

    def _run_local(self) -> MemoryReport:
        report = MemoryReport(policy='local')
        for p in self.processes:
            if not p.page_sequence or self.config.page_size <= 0:
                continue
            frames = local_frame_count(p.memory_needed, self.config.page_size,
                                       self.config.allocation_percentage)
            table = FIFOPageTable(frames)
            table.execute(p.page_sequence)
            report.frames[p.pid] = frames
            report.replacements[p.pid] = table.replacement_count
            report.total_replacements += table.replacement_count
            report.total_faults += table.fault_count
            logger.debug("  pid=%d frames=%d FIFO replacements=%d", p.pid, frames, table.replacement_count)
        return report

    def _run_global(self) -> MemoryReport:
        frames = global_frame_count(self.config.memory_size, self.config.page_size)
        combined = [encode_global_page(p.pid, page) for p in self.processes for page in p.page_sequence]
        table = FIFOPageTable(frames)
        table.execute(combined)
        logger.debug("  global frames=%d FIFO replacements=%d", frames, table.replacement_count)
        return MemoryReport(policy='global', total_replacements=table.replacement_count,
                            total_faults=table.fault_count, global_frames=frames)
