from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional


class EventType(Enum):
    PROCESS_ARRIVAL = auto()
    DISPATCH = auto()
    IO_REQUEST = auto()
    IO_START = auto()       # request admitted into a device slot
    IO_WAIT = auto()        # device full, request queued
    IO_COMPLETE = auto()
    BLOCKED_TO_READY = auto()
    QUANTUM_EXPIRED = auto()
    PROCESS_EXIT = auto()
    CPU_IDLE = auto()


@dataclass
class Event:
    time: int
    order: int  # sequence number within the run
    type: EventType
    pid: Optional[int] = None
    payload: Any = None

    def __repr__(self):
        return f"Event(time={self.time}, type={self.type.name}, pid={self.pid}, payload={self.payload})"
