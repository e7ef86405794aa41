# Device class
from collections import deque
from typing import Deque, List, Optional


class Device:
    def __init__(self, name: str, capacity: int, operation_time: int):
        self.name = name
        self.capacity = capacity              # simultaneous users
        self.operation_time = operation_time  # ticks to service one request
        self.active: List[int] = []           # pids being serviced, in admission order
        self.wait_queue: Deque[int] = deque()
        self.completed = 0
        self.busy_time = 0
        self.busy_since: Optional[int] = None

    def has_free_slot(self) -> bool:
        return len(self.active) < self.capacity

    def holds(self, pid: int) -> bool:
        return pid in self.active or pid in self.wait_queue

    def enqueue(self, pid: int) -> None:
        self.wait_queue.append(pid)

    def pop_oldest(self):
        if not self.wait_queue:
            return None
        return self.wait_queue.popleft()

    def __repr__(self):
        return (f"Device({self.name}, cap={self.capacity}, op={self.operation_time}, "
                f"active={self.active}, queued={list(self.wait_queue)})")
