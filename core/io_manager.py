"""
I/O manager: decides when a dispatched process requests I/O and keeps
device admission, wait queues and completion bookkeeping.

The manager never touches the ready queue. Completed processes are handed
back to the caller of `advance`, which re-admits them.
"""
import logging
import random
from typing import Dict, List, Optional, Sequence, Tuple

from core.device import Device
from core.errors import SimulationError
from core.process import Process, ProcessState

logger = logging.getLogger(__name__)


class IOManager:
    def __init__(self, devices: Sequence[Device], rng: Optional[random.Random] = None):
        self.devices: List[Device] = list(devices)
        self.rng = rng if rng is not None else random.Random()
        # pid -> (process, device) for every blocked process
        self._blocked: Dict[int, Tuple[Process, Device]] = {}

    # random decisions
    def requests_io(self, process: Process) -> bool:
        if process.remaining_time <= 0 or process.is_finished:
            return False
        return self.rng.randrange(100) < process.io_chance

    def request_offset(self, slice_length: int) -> int:
        if slice_length <= 1:
            return 1
        return self.rng.randint(1, slice_length)

    def choose_device(self) -> Optional[Device]:
        if not self.devices:
            return None
        return self.rng.choice(self.devices)

    def plan_request(self, process: Process, quantum: int) -> Optional[Tuple[int, Device]]:
        """
        Decide whether `process` blocks for I/O during this dispatch.

        Returns (offset, device) when the request fires `offset` units into the
        slice, or None when the process runs its slice undisturbed. A request
        that would land at or after the natural end of the process is voided,
        as is any request when no devices exist.
        """
        if not self.requests_io(process):
            return None
        slice_length = min(quantum, process.remaining_time)
        if slice_length <= 0:
            return None
        offset = self.request_offset(slice_length)
        if process.remaining_time - offset <= 0:
            logger.debug("  pid=%d I/O request at +%d voided, process finishes first", process.pid, offset)
            return None
        device = self.choose_device()
        if device is None:
            return None
        return offset, device

    # device bookkeeping
    def is_blocked(self, pid: int) -> bool:
        return pid in self._blocked

    def blocked_count(self) -> int:
        return len(self._blocked)

    def device_of(self, pid: int) -> Optional[Device]:
        entry = self._blocked.get(pid)
        return entry[1] if entry else None

    def admit(self, process: Process, device: Device, now: int) -> bool:
        """
        Block `process` on `device`. Returns True if it got a slot straight
        away, False if it was queued. A process already blocked is left alone.
        """
        if process.pid in self._blocked:
            logger.debug("[t=%d] pid=%d already blocked on %s", now, process.pid,
                         self._blocked[process.pid][1].name)
            return process.pid in self._blocked[process.pid][1].active
        for other in self.devices:
            if other.holds(process.pid):
                raise SimulationError("process already held by a device", time=now,
                                      pid=process.pid, device=other.name)

        process.state = ProcessState.BLOCKED
        self._blocked[process.pid] = (process, device)
        if device.has_free_slot():
            device.active.append(process.pid)
            if device.busy_since is None:
                device.busy_since = now
            process.io_start_time = now
            return True
        device.enqueue(process.pid)
        return False

    def advance(self, elapsed: int, now: int) -> Tuple[List[Tuple[Process, Device]], List[Tuple[Process, Device]]]:
        """
        Retire device operations whose service time has passed and promote
        waiters into freed slots.

        Returns (completed, promoted) as (process, device) pairs, in device
        order: requests that finished and waiters that just started service.
        """
        if elapsed < 0:
            raise ValueError(f"time cannot run backwards ({elapsed})")
        completed: List[Tuple[Process, Device]] = []
        promoted: List[Tuple[Process, Device]] = []
        for device in self.devices:
            still_active = []
            for pid in device.active:
                process = self._blocked[pid][0]
                if now - process.io_start_time >= device.operation_time:
                    process.io_end_time = now
                    process.total_io_time += device.operation_time
                    device.completed += 1
                    del self._blocked[pid]
                    completed.append((process, device))
                else:
                    still_active.append(pid)
            device.active = still_active

            while device.has_free_slot() and device.wait_queue:
                pid = device.pop_oldest()
                process = self._blocked[pid][0]
                device.active.append(pid)
                process.io_start_time = now
                promoted.append((process, device))

            if len(device.active) > device.capacity:
                raise SimulationError("device over capacity", time=now, device=device.name)
            if not device.active and device.busy_since is not None:
                device.busy_time += now - device.busy_since
                device.busy_since = None
        return completed, promoted
