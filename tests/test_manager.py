import itertools

import pytest

from txnbench.config import LOG_BATCH_TIME, MIN_TS_INTVL, TsAlloc
from txnbench.manager import UINT64_MAX, Manager
from txnbench.stats import Stats


def test_cas_allocation_starts_at_one_and_increases():
    manager = Manager(thread_cnt=2)
    first = manager.get_ts(0)
    second = manager.get_ts(1)
    assert first == 1
    assert second == first + 1


def test_mutex_allocation_preincrements():
    manager = Manager(thread_cnt=2, ts_alloc=TsAlloc.MUTEX)
    first = manager.get_ts(0)
    assert first == 2
    assert manager.get_ts(0) == first + 1


def test_batch_allocation_steps_by_batch_size():
    manager = Manager(thread_cnt=2, ts_batch_alloc=True, ts_batch_num=5)
    first = manager.get_ts(0)
    second = manager.get_ts(0)
    assert second - first == 5


def test_batch_allocation_requires_cas():
    manager = Manager(ts_alloc=TsAlloc.MUTEX, ts_batch_alloc=True)
    with pytest.raises(ValueError):
        manager.get_ts(0)


def test_hardware_timestamps_unavailable():
    manager = Manager(ts_alloc=TsAlloc.HW)
    with pytest.raises(RuntimeError):
        manager.get_ts(0)


def test_clock_timestamps_are_unique_per_thread():
    manager = Manager(thread_cnt=4, ts_alloc=TsAlloc.CLOCK, clock=lambda: 10)
    stamps = {manager.get_ts(tid) for tid in range(4)}
    assert len(stamps) == 4
    assert {ts % 4 for ts in stamps} == {0, 1, 2, 3}


def test_allocation_time_is_recorded():
    stats = Stats(thread_cnt=1)
    stats.init_thread(0)
    ticks = itertools.count(0, 100)
    manager = Manager(thread_cnt=1, stats=stats, clock=lambda: next(ticks))
    manager.get_ts(0)
    assert stats.threads[0].time_ts_alloc == 100


def test_min_ts_is_smallest_active():
    manager = Manager(thread_cnt=3, clock=lambda: MIN_TS_INTVL + 1)
    for tid, ts in enumerate([30, 10, 20]):
        manager.add_ts(tid, ts)
    assert manager.get_min_ts(0) == 10
    assert manager.get_min_ts(1) == 10


def test_min_ts_only_recomputed_by_thread_zero():
    manager = Manager(thread_cnt=1, clock=lambda: MIN_TS_INTVL + 1)
    manager.add_ts(0, 50)
    assert manager.get_min_ts(1) == 0


def test_min_ts_never_decreases():
    manager = Manager(thread_cnt=1, clock=lambda: MIN_TS_INTVL + 1)
    manager.add_ts(0, 40)
    assert manager.get_min_ts(0) == 40
    manager.all_ts[0] = 5
    assert manager.get_min_ts(0) == 40


def test_add_ts_rejects_older_timestamp():
    manager = Manager(thread_cnt=1)
    manager.add_ts(0, 100)
    with pytest.raises(ValueError):
        manager.add_ts(0, 99)


def test_add_ts_accepts_any_first_value():
    manager = Manager(thread_cnt=1)
    assert manager.all_ts[0] == UINT64_MAX
    manager.add_ts(0, 3)
    assert manager.all_ts[0] == 3


def test_epoch_advances_after_batch_interval():
    now = [0]
    manager = Manager(clock=lambda: now[0])
    manager.update_epoch()
    assert manager.epoch == 0
    now[0] = LOG_BATCH_TIME * 1000 * 1000 + 1
    manager.update_epoch()
    assert manager.epoch == 1
    manager.update_epoch()
    assert manager.epoch == 1


def test_row_latch_release_without_lock_fails():
    manager = Manager()
    row = object()
    manager.lock_row(row)
    manager.release_row(row)
    with pytest.raises(RuntimeError):
        manager.release_row(row)


def test_txn_registry_per_thread():
    manager = Manager(thread_cnt=2)
    marker = object()
    manager.txns[1] = marker
    assert manager.txns == [None, marker]