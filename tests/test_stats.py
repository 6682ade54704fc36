import pytest

from txnbench.stats import Stats, ThreadStats, TmpStats


@pytest.fixture
def stats():
    s = Stats(thread_cnt=2)
    for tid in range(2):
        s.init_thread(tid)
    return s


def test_thread_stats_clear_resets_counters():
    ts = ThreadStats(txn_cnt=5, run_time=2.5, debug3=9)
    ts.clear()
    assert (ts.txn_cnt, ts.run_time, ts.debug3) == (0, 0.0, 0)


def test_tmp_stats_clear():
    tmp = TmpStats(time_man=1.0, time_index=2.0, time_wait=3.0)
    tmp.clear()
    assert (tmp.time_man, tmp.time_index, tmp.time_wait) == (0.0, 0.0, 0.0)


def test_commit_folds_tmp_into_thread(stats):
    stats.tmp[0].time_man = 10.0
    stats.tmp[0].time_wait = 4.0
    stats.commit(0)
    stats.tmp[0].time_man = 5.0
    stats.commit(0)
    assert stats.threads[0].time_man == 15.0
    assert stats.threads[0].time_wait == 4.0
    assert stats.tmp[0].time_man == 0.0


def test_abort_discards_tmp(stats):
    stats.tmp[1].time_index = 7.0
    stats.abort(1)
    stats.commit(1)
    assert stats.threads[1].time_index == 0.0


def test_clear_resets_thread_and_globals(stats):
    stats.threads[0].txn_cnt = 3
    stats.deadlock = 2
    stats.dl_wait_time = 1.5
    stats.clear(0)
    assert stats.threads[0].txn_cnt == 0
    assert stats.deadlock == 0
    assert stats.dl_wait_time == 0.0


def test_add_debug_requires_flags():
    s = Stats(thread_cnt=1, prt_lat_distr=True)
    s.init_thread(0)
    s.add_debug(0, 42, 1)
    assert s.threads[0].all_debug1[0] == 0
    s.warmup_finish = True
    s.add_debug(0, 42, 1)
    s.threads[0].txn_cnt = 1
    s.add_debug(0, 43, 2)
    assert s.threads[0].all_debug1[0] == 42
    assert s.threads[0].all_debug2[1] == 43


def test_disabled_stats_do_nothing():
    s = Stats(thread_cnt=1, enabled=False)
    s.init_thread(0)
    assert s.threads == {}


def test_summary_totals(stats):
    stats.threads[0].txn_cnt = 3
    stats.threads[1].txn_cnt = 4
    stats.threads[1].abort_cnt = 2
    line = stats.summary()
    assert line.startswith("[summary] txn_cnt=7, abort_cnt=2, run_time=")
    assert ", deadlock_cnt=0, cycle_detect=0," in line


def test_summary_latency_without_txns_is_nan(stats):
    line = stats.summary()
    value = line.split("latency=")[1].split(",")[0]
    assert value in ("nan", "-nan")


def test_print_writes_console_and_file(stats, tmp_path, capsys):
    stats.threads[0].txn_cnt = 1
    stats.threads[1].abort_cnt = 3
    path = tmp_path / "out.txt"
    stats.print(str(path))
    out = capsys.readouterr().out
    assert "[tid=0] txn_cnt=1,abort_cnt=0\n" in out
    assert "[tid=1] txn_cnt=0,abort_cnt=3\n" in out
    assert out.rstrip("\n").endswith(stats.summary())
    written = path.read_text()
    assert written.startswith("[summary] txn_cnt=1, abort_cnt=3")
    assert written.endswith("\n")


def test_print_lat_distr_appends_samples(tmp_path):
    s = Stats(thread_cnt=1, prt_lat_distr=True)
    s.init_thread(0)
    s.threads[0].txn_cnt = 2
    s.threads[0].all_debug1[:2] = [5, 7]
    s.threads[0].all_debug2[:2] = [1, 2]
    path = tmp_path / "lat.txt"
    path.write_text("head\n")
    s.print_lat_distr(str(path))
    assert path.read_text() == "head\n[all_debug1 thd=0] 5,7,\n[all_debug2 thd=0] 1,2,\n"


def test_summary_needs_every_thread():
    s = Stats(thread_cnt=2)
    s.init_thread(0)
    with pytest.raises(KeyError):
        s.summary()