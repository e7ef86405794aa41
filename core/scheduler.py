# Ready queue owner
from collections import deque
from typing import Deque, Optional, Set

from core.process import Process, ProcessState


class Scheduler:
    def __init__(self, time_quantum: int):
        self.time_quantum = time_quantum
        self.ready_queue: Deque[Process] = deque()
        self._queued: Set[int] = set()
        self.running: Optional[Process] = None

    def enqueue_ready(self, process: Process) -> bool:
        """Append to the tail unless already queued. Returns True if appended."""
        if process.pid in self._queued:
            return False
        process.state = ProcessState.READY
        self.ready_queue.append(process)
        self._queued.add(process.pid)
        return True

    def has_ready(self) -> bool:
        return bool(self.ready_queue)

    def pick_next(self) -> Optional[Process]:
        if not self.ready_queue:
            return None
        process = self.ready_queue.popleft()
        self._queued.discard(process.pid)
        process.state = ProcessState.RUNNING
        self.running = process
        return process

    def release(self) -> None:
        self.running = None

    def __len__(self):
        return len(self.ready_queue)
