from enum import Enum, auto
from typing import Iterable, List, Optional


class ProcessState(Enum):
    NEW = auto()       # declared, not yet arrived
    READY = auto()
    RUNNING = auto()
    BLOCKED = auto()
    FINISHED = auto()


class Process:
    def __init__(self, pid: int, creation_time: int, execution_time: int, priority: int = 0,
                 memory_needed: int = 0, page_sequence: Iterable[int] = (), io_chance: int = 0):
        self.pid = pid
        self.creation_time = creation_time
        self.execution_time = execution_time
        self.priority = priority
        self.memory_needed = memory_needed
        self.page_sequence: List[int] = list(page_sequence)
        self.io_chance = io_chance

        self.remaining_time = execution_time
        self.state = ProcessState.NEW
        self.ready_time = 0
        self.blocked_time = 0
        self.start_time: Optional[int] = None
        self.finish_time: Optional[int] = None
        self.io_start_time: Optional[int] = None
        self.io_end_time: Optional[int] = None
        self.total_io_time = 0

    @property
    def is_finished(self) -> bool:
        return self.state is ProcessState.FINISHED

    @property
    def turnaround_time(self) -> Optional[int]:
        if self.finish_time is None:
            return None
        return self.finish_time - self.creation_time

    @property
    def waiting_time(self) -> Optional[int]:
        if self.finish_time is None:
            return None
        return self.turnaround_time - self.execution_time

    def run_for(self, amount: int) -> None:
        if amount < 0 or amount > self.remaining_time:
            raise ValueError(f"pid {self.pid} cannot run {amount} with {self.remaining_time} left")
        self.remaining_time -= amount

    def __repr__(self) -> str:
        return (f"Process(pid={self.pid}, state={self.state.name}, "
                f"remaining={self.remaining_time}, ready={self.ready_time}, blocked={self.blocked_time})")
