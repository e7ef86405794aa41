import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from core.config import DEFAULT_MAX_TIME, SimulationConfig
from core.device import Device
from core.errors import SimulationLimitExceeded
from core.event import Event, EventType
from core.io_manager import IOManager
from core.memory import MemoryReport, MemorySimulator
from core.process import Process, ProcessState
from core.scheduler import Scheduler

logger = logging.getLogger(__name__)

ROUND_ROBIN_NAMES = ('rr', 'roundrobin')


@dataclass
class SystemState:
    """What the CPU, ready queue, blocked processes and devices hold at one instant."""
    time: int
    running: Optional[Tuple[int, int]]                  # (pid, remaining)
    ready: List[Tuple[int, int]]                        # (pid, remaining), queue order
    blocked: List[Tuple[int, int, str, bool]]           # (pid, remaining, device, in service)
    devices: List[Tuple[str, List[int], List[int]]]     # (name, active, waiting)

    def lines(self) -> List[str]:
        out = [f"[t={self.time}] state"]
        if self.running:
            out.append(f"  CPU: pid {self.running[0]} (remaining={self.running[1]})")
        else:
            out.append("  CPU: idle")
        ready = " ".join(f"{pid}(rem={rem})" for pid, rem in self.ready)
        out.append(f"  ready: {ready or 'none'}")
        if not self.blocked:
            out.append("  blocked: none")
        for pid, rem, device, serviced in self.blocked:
            out.append(f"  blocked: pid {pid} (rem={rem}) {'using' if serviced else 'waiting for'} {device}")
        for name, active, waiting in self.devices:
            status = 'BUSY' if active else 'FREE'
            out.append(f"  device {name} [{status}] using={active} queue={waiting}")
        return out


@dataclass
class SimulationResult:
    config: SimulationConfig
    processes: List[Process]
    devices: List[Device]
    final_time: int
    cpu_busy_time: int
    events: List[Event] = field(default_factory=list)
    memory: Optional[MemoryReport] = None

    @property
    def average_turnaround(self) -> float:
        if not self.processes:
            return 0.0
        return sum(p.turnaround_time for p in self.processes) / len(self.processes)

    @property
    def average_waiting(self) -> float:
        if not self.processes:
            return 0.0
        return sum(p.waiting_time for p in self.processes) / len(self.processes)

    @property
    def cpu_utilisation(self) -> float:
        if self.final_time <= 0:
            return 0.0
        return 100.0 * self.cpu_busy_time / self.final_time


class System:
    """
    Round-robin CPU simulation over a fixed process set with contended devices.

    One logical clock and one control loop. Each cycle admits arrivals, then
    either idles for one tick or dispatches the head of the ready queue for at
    most one quantum, possibly cut short by an I/O request. All accounting for
    an elapsed interval is applied where the clock is advanced.
    """

    def __init__(self, config: SimulationConfig, devices: Sequence[Device], processes: Sequence[Process],
                 rng: Optional[random.Random] = None, max_time: int = DEFAULT_MAX_TIME,
                 trace_states: bool = False):
        config.validate(devices, processes)
        self.config = config
        self.time_quantum = config.quantum
        self.devices = list(devices)
        self.processes = list(processes)
        self.process_table: Dict[int, Process] = {p.pid: p for p in self.processes}
        self.max_time = max_time

        self.current_time = 0
        self.events: List[Event] = []
        self._event_counter = 0
        self.trace_states = trace_states
        self.states: List[SystemState] = []

        self.scheduler = Scheduler(time_quantum=config.quantum)
        self.io_manager = IOManager(self.devices, rng=rng)
        self.finished_count = 0

        # stats
        self.cpu_busy_time = 0

        algorithm = config.algorithm.lower().replace(' ', '').replace('_', '').replace('-', '')
        if algorithm and algorithm not in ROUND_ROBIN_NAMES:
            logger.warning("algorithm %r not supported, simulating round robin", config.algorithm)

    # event stream
    def push_event(self, etype: EventType, pid: Optional[int] = None, payload: Any = None) -> Event:
        self._event_counter += 1
        ev = Event(time=self.current_time, order=self._event_counter, type=etype, pid=pid, payload=payload)
        self.events.append(ev)
        logger.debug("[t=%d] %s pid=%s payload=%s", self.current_time, etype.name, pid, payload)
        return ev

    def snapshot(self) -> SystemState:
        running = self.scheduler.running
        blocked = []
        for p in self.processes:
            if p.state is ProcessState.BLOCKED:
                device = self.io_manager.device_of(p.pid)
                blocked.append((p.pid, p.remaining_time, device.name, p.pid in device.active))
        return SystemState(
            time=self.current_time,
            running=(running.pid, running.remaining_time) if running else None,
            ready=[(p.pid, p.remaining_time) for p in self.scheduler.ready_queue],
            blocked=blocked,
            devices=[(d.name, list(d.active), list(d.wait_queue)) for d in self.devices],
        )

    def _record_state(self) -> None:
        if not (self.trace_states or logger.isEnabledFor(logging.DEBUG)):
            return
        state = self.snapshot()
        if self.trace_states:
            self.states.append(state)
        for line in state.lines():
            logger.debug(line)

    # start
    def start(self) -> SimulationResult:
        self.run()
        memory = MemorySimulator(self.config, self.processes).run()
        return SimulationResult(
            config=self.config,
            processes=self.processes,
            devices=self.devices,
            final_time=self.current_time,
            cpu_busy_time=self.cpu_busy_time,
            events=self.events,
            memory=memory,
        )

    # main loop
    def run(self) -> None:
        total = len(self.processes)
        while self.finished_count < total:
            if self.current_time > self.max_time:
                raise SimulationLimitExceeded(
                    f"{total - self.finished_count} of {total} processes unfinished after safety cap {self.max_time}",
                    time=self.current_time)
            self._admit_arrivals()
            if not self.scheduler.has_ready():
                self._idle_tick()
                continue
            self._dispatch()
        logger.debug("[t=%d] all %d processes finished", self.current_time, total)

    def _admit_arrivals(self) -> None:
        # declaration order, not arrival order
        for p in self.processes:
            if p.state is ProcessState.NEW and p.creation_time <= self.current_time:
                # arrival noticed late because the clock jumped over it
                p.ready_time += self.current_time - p.creation_time
                self.scheduler.enqueue_ready(p)
                self.push_event(EventType.PROCESS_ARRIVAL, pid=p.pid)

    def _elapse(self, amount: int, running: Optional[Process] = None) -> None:
        if amount < 0:
            raise ValueError(f"time cannot run backwards ({amount})")
        for p in self.processes:
            if p is running:
                continue
            if p.state is ProcessState.READY:
                p.ready_time += amount
            elif p.state is ProcessState.BLOCKED:
                p.blocked_time += amount
        self.current_time += amount

    def _idle_tick(self) -> None:
        self._record_state()
        self.push_event(EventType.CPU_IDLE, payload={'blocked': self.io_manager.blocked_count()})
        self._elapse(1)
        self._advance_devices(1)

    def _dispatch(self) -> None:
        p = self.scheduler.pick_next()
        if p.start_time is None:
            p.start_time = self.current_time
        self._record_state()

        plan = self.io_manager.plan_request(p, self.time_quantum)
        if plan is not None:
            run_for, device = plan
        else:
            run_for, device = min(self.time_quantum, p.remaining_time), None

        self.push_event(EventType.DISPATCH, pid=p.pid,
                        payload={'run': run_for, 'remaining': p.remaining_time - run_for})
        self._elapse(run_for, running=p)
        p.run_for(run_for)
        self.cpu_busy_time += run_for
        self.scheduler.release()

        if device is not None:
            self.push_event(EventType.IO_REQUEST, pid=p.pid, payload={'device': device.name})
            if self.io_manager.admit(p, device, self.current_time):
                self.push_event(EventType.IO_START, pid=p.pid, payload={'device': device.name})
            else:
                self.push_event(EventType.IO_WAIT, pid=p.pid,
                                payload={'device': device.name, 'position': len(device.wait_queue)})
        elif p.remaining_time <= 0:
            p.state = ProcessState.FINISHED
            p.finish_time = self.current_time
            self.finished_count += 1
            self.push_event(EventType.PROCESS_EXIT, pid=p.pid)
        else:
            self.scheduler.enqueue_ready(p)
            self.push_event(EventType.QUANTUM_EXPIRED, pid=p.pid)

        self._advance_devices(run_for)

    def _advance_devices(self, elapsed: int) -> None:
        # completions before re-admission
        completed, promoted = self.io_manager.advance(elapsed, self.current_time)
        for p, device in promoted:
            self.push_event(EventType.IO_START, pid=p.pid, payload={'device': device.name})
        for p, device in completed:
            self.push_event(EventType.IO_COMPLETE, pid=p.pid, payload={'device': device.name})
            self.scheduler.enqueue_ready(p)
            self.push_event(EventType.BLOCKED_TO_READY, pid=p.pid)
