import random

import pytest

from core.device import Device
from core.errors import SimulationError
from core.io_manager import IOManager
from core.process import Process, ProcessState
from conftest import ScriptedRandom


def test_requests_io_respects_chance():
    p = Process(1, 0, 10, io_chance=30)
    manager = IOManager([], rng=ScriptedRandom(draws=[29, 30]))
    assert manager.requests_io(p) is True
    assert manager.requests_io(p) is False


def test_finished_process_never_requests_io():
    p = Process(1, 0, 0, io_chance=100)
    manager = IOManager([], rng=random.Random(1))
    assert manager.requests_io(p) is False


def test_request_offset_within_slice():
    manager = IOManager([], rng=random.Random(3))
    assert manager.request_offset(0) == 1
    assert manager.request_offset(1) == 1
    offsets = {manager.request_offset(4) for _ in range(200)}
    assert offsets == {1, 2, 3, 4}


def test_choose_device_none_without_devices():
    assert IOManager([], rng=random.Random(0)).choose_device() is None


def test_plan_voided_when_process_would_finish_first():
    p = Process(1, 0, 2, io_chance=100)
    manager = IOManager([Device('disk', 1, 4)], rng=ScriptedRandom(draws=[0], offsets=[2]))
    assert manager.plan_request(p, 3) is None


def test_plan_voided_without_devices():
    p = Process(1, 0, 10, io_chance=100)
    manager = IOManager([], rng=ScriptedRandom(draws=[0], offsets=[1]))
    assert manager.plan_request(p, 3) is None


def test_plan_returns_offset_and_device():
    disk, printer = Device('disk', 1, 4), Device('printer', 1, 4)
    p = Process(1, 0, 10, io_chance=100)
    manager = IOManager([disk, printer], rng=ScriptedRandom(draws=[0], offsets=[2], picks=[1]))
    assert manager.plan_request(p, 3) == (2, printer)


def test_admit_queues_when_full_and_promotes_in_fifo_order():
    disk = Device('disk', 1, 4)
    manager = IOManager([disk], rng=random.Random(0))
    p1, p2, p3 = Process(1, 0, 5), Process(2, 0, 5), Process(3, 0, 5)

    assert manager.admit(p1, disk, 0) is True
    assert manager.admit(p2, disk, 1) is False
    assert manager.admit(p3, disk, 2) is False
    assert disk.active == [1]
    assert list(disk.wait_queue) == [2, 3]
    assert all(p.state is ProcessState.BLOCKED for p in (p1, p2, p3))
    assert p2.io_start_time is None

    completed, promoted = manager.advance(3, 3)
    assert completed == [] and promoted == []

    completed, promoted = manager.advance(1, 4)
    assert completed == [(p1, disk)]
    assert promoted == [(p2, disk)]
    assert p1.io_end_time == 4 and p1.total_io_time == 4
    assert p2.io_start_time == 4
    assert disk.active == [2]
    assert list(disk.wait_queue) == [3]
    assert disk.completed == 1
    assert not manager.is_blocked(1)
    assert manager.is_blocked(3)


def test_admit_is_idempotent():
    disk = Device('disk', 2, 4)
    manager = IOManager([disk], rng=random.Random(0))
    p = Process(1, 0, 5)
    manager.admit(p, disk, 0)
    assert manager.admit(p, disk, 1) is True
    assert disk.active == [1]
    assert p.io_start_time == 0
    assert manager.blocked_count() == 1


def test_admit_rejects_pid_held_elsewhere():
    disk, printer = Device('disk', 1, 4), Device('printer', 1, 4)
    printer.enqueue(1)
    manager = IOManager([disk, printer], rng=random.Random(0))
    with pytest.raises(SimulationError):
        manager.admit(Process(1, 0, 5), disk, 0)


def test_capacity_shared_between_users():
    net = Device('network', 2, 3)
    manager = IOManager([net], rng=random.Random(0))
    procs = [Process(i, 0, 5) for i in range(1, 4)]
    for p in procs:
        manager.admit(p, net, 0)
    assert net.active == [1, 2]
    assert list(net.wait_queue) == [3]
    completed, promoted = manager.advance(3, 3)
    assert [p.pid for p, _ in completed] == [1, 2]
    assert [p.pid for p, _ in promoted] == [3]
    assert net.busy_time == 0
    completed, promoted = manager.advance(3, 6)
    assert [p.pid for p, _ in completed] == [3]
    assert net.busy_time == 6
    assert net.completed == 3
