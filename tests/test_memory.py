import pytest

from core.config import SimulationConfig
from core.memory import (FIFOPageTable, MemorySimulator, encode_global_page,
                         global_frame_count, local_frame_count)
from core.process import Process


def make_config(policy='local', memory_size=1024, page_size=64, allocation=50):
    return SimulationConfig('RR', 3, policy, memory_size, page_size, allocation, 0)


def test_fifo_two_frames_counts_two_replacements():
    table = FIFOPageTable(2)
    assert table.execute([1, 2, 3, 1]) == 2
    assert table.replacement_count == 2
    assert table.fault_count == 4
    assert table.resident_pages() == [3, 1]


def test_fifo_hits_do_not_refresh_arrival_order():
    table = FIFOPageTable(3)
    table.execute([1, 2, 3])
    assert table.access(1) is True
    # 1 is still the oldest arrival, so it goes first
    table.access(4)
    assert table.resident_pages() == [2, 3, 4]
    table.access(5)
    assert table.resident_pages() == [3, 4, 5]


def test_fifo_fills_free_frames_without_replacing():
    table = FIFOPageTable(4)
    table.execute([7, 8, 7, 9])
    assert table.replacement_count == 0
    assert table.fault_count == 3


def test_fifo_rejects_zero_capacity():
    with pytest.raises(ValueError):
        FIFOPageTable(0)


@pytest.mark.parametrize('memory_needed,page_size,allocation,frames', [
    (256, 64, 50, 2),
    (250, 64, 50, 2),
    (64, 64, 50, 1),
    (0, 64, 50, 1),
    (1024, 64, 100, 16),
    (1000, 64, 33.3, 5),
])
def test_local_frame_count(memory_needed, page_size, allocation, frames):
    assert local_frame_count(memory_needed, page_size, allocation) == frames


def test_global_frame_count_floor_and_minimum():
    assert global_frame_count(1024, 64) == 16
    assert global_frame_count(100, 64) == 1
    assert global_frame_count(10, 64) == 1
    assert global_frame_count(1024, 0) == 1


def test_local_policy_sums_per_process_replacements():
    processes = [
        Process(1, 0, 7, memory_needed=256, page_sequence=[1, 2, 3, 1, 4, 1]),
        Process(2, 1, 4, memory_needed=128, page_sequence=[5, 6, 5]),
        Process(3, 2, 2, memory_needed=64, page_sequence=[7]),
        Process(4, 2, 2, memory_needed=64, page_sequence=[]),
    ]
    report = MemorySimulator(make_config('LOCAL'), processes).run()
    assert report.policy == 'local'
    assert report.frames == {1: 2, 2: 1, 3: 1}
    assert report.replacements == {1: 3, 2: 2, 3: 0}
    assert report.total_replacements == 5


def test_global_policy_keeps_processes_apart():
    assert encode_global_page(1, 5) != encode_global_page(2, 5)
    processes = [
        Process(1, 0, 3, page_sequence=[5]),
        Process(2, 0, 3, page_sequence=[5]),
    ]
    report = MemorySimulator(make_config('global', memory_size=128, page_size=64), processes).run()
    # two frames, two distinct pages: no aliasing means two faults and no hit
    assert report.global_frames == 2
    assert report.total_faults == 2
    assert report.total_replacements == 0


def test_global_policy_single_shared_pool():
    processes = [
        Process(1, 0, 3, page_sequence=[5, 6]),
        Process(2, 0, 3, page_sequence=[5]),
    ]
    report = MemorySimulator(make_config('Global', memory_size=128, page_size=64), processes).run()
    assert report.total_replacements == 1
    assert report.replacements == {}


def test_unknown_policy_is_treated_as_global():
    processes = [Process(1, 0, 3, page_sequence=[1, 2, 3])]
    report = MemorySimulator(make_config('shared', memory_size=128, page_size=64), processes).run()
    assert report.policy == 'global'
    assert report.total_replacements == 1
