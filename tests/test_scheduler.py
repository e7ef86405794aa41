from core.process import Process, ProcessState
from core.scheduler import Scheduler


def test_enqueue_is_idempotent():
    s = Scheduler(time_quantum=2)
    p = Process(1, 0, 4)
    assert s.enqueue_ready(p) is True
    assert s.enqueue_ready(p) is False
    assert len(s) == 1
    assert p.state is ProcessState.READY


def test_pick_next_is_fifo_and_marks_running():
    s = Scheduler(time_quantum=2)
    a, b = Process(1, 0, 4), Process(2, 0, 4)
    s.enqueue_ready(a)
    s.enqueue_ready(b)
    assert s.pick_next() is a
    assert a.state is ProcessState.RUNNING
    assert s.running is a
    # a popped process may be queued again
    assert s.enqueue_ready(a) is True
    assert [p.pid for p in s.ready_queue] == [2, 1]
    s.release()
    assert s.running is None


def test_pick_next_empty():
    assert Scheduler(time_quantum=1).pick_next() is None
