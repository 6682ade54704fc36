"""Per-thread and global run statistics and the summary report."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Optional

from txnbench.config import MAX_TXN_PER_PART, STATS_ENABLE

BILLION = 1_000_000_000


@dataclass
class ThreadStats:
    """Counters collected by one worker thread."""

    txn_cnt: int = 0
    abort_cnt: int = 0
    run_time: float = 0.0
    time_man: float = 0.0
    time_index: float = 0.0
    time_wait: float = 0.0
    time_abort: float = 0.0
    time_cleanup: float = 0.0
    time_ts_alloc: int = 0
    time_query: float = 0.0
    wait_cnt: int = 0
    debug1: int = 0
    debug2: int = 0
    debug3: int = 0
    debug4: int = 0
    debug5: int = 0
    latency: int = 0
    all_debug1: list = field(default_factory=lambda: [0] * MAX_TXN_PER_PART)
    all_debug2: list = field(default_factory=lambda: [0] * MAX_TXN_PER_PART)

    def clear(self) -> None:
        """Reset every counter; the per-transaction samples are kept."""
        for f in fields(self):
            if f.name not in ("all_debug1", "all_debug2"):
                setattr(self, f.name, type(getattr(self, f.name))())


@dataclass
class TmpStats:
    """Timings of the running transaction, kept only if it commits."""

    time_man: float = 0.0
    time_index: float = 0.0
    time_wait: float = 0.0

    def clear(self) -> None:
        self.time_man = 0.0
        self.time_index = 0.0
        self.time_wait = 0.0


_FLOAT_TOTALS = (
    "run_time", "time_man", "debug1", "debug2", "debug3", "debug4", "debug5",
    "time_index", "time_abort", "time_cleanup", "time_wait", "time_ts_alloc",
    "latency", "time_query",
)


class Stats:
    """Statistics of all worker threads plus global deadlock counters."""

    def __init__(self, thread_cnt: int, prt_lat_distr: bool = False,
                 enabled: bool = STATS_ENABLE) -> None:
        self.thread_cnt = thread_cnt
        self.prt_lat_distr = prt_lat_distr
        self.enabled = enabled
        self.warmup_finish = False
        self.threads: dict[int, ThreadStats] = {}
        self.tmp: dict[int, TmpStats] = {}
        self.dl_detect_time = 0.0
        self.dl_wait_time = 0.0
        self.cycle_detect = 0
        self.deadlock = 0

    def init_thread(self, thread_id: int) -> None:
        if not self.enabled:
            return
        self.threads[thread_id] = ThreadStats()
        self.tmp[thread_id] = TmpStats()

    def clear(self, thread_id: int) -> None:
        if not self.enabled:
            return
        self.threads[thread_id].clear()
        self.tmp[thread_id].clear()
        self.dl_detect_time = 0.0
        self.dl_wait_time = 0.0
        self.cycle_detect = 0
        self.deadlock = 0

    def add_debug(self, thread_id: int, value: int, select: int) -> None:
        """Record a per-transaction sample in series 1 or 2."""
        if self.prt_lat_distr and self.warmup_finish:
            stats = self.threads[thread_id]
            if select == 1:
                stats.all_debug1[stats.txn_cnt] = value
            elif select == 2:
                stats.all_debug2[stats.txn_cnt] = value

    def commit(self, thread_id: int) -> None:
        """Fold the running transaction's timings into the thread's totals."""
        if not self.enabled:
            return
        stats, tmp = self.threads[thread_id], self.tmp[thread_id]
        stats.time_man += tmp.time_man
        stats.time_index += tmp.time_index
        stats.time_wait += tmp.time_wait
        tmp.clear()

    def abort(self, thread_id: int) -> None:
        if self.enabled:
            self.tmp[thread_id].clear()

    def _totals(self) -> dict:
        totals: dict = {"txn_cnt": 0, "abort_cnt": 0}
        totals.update((name, 0.0) for name in _FLOAT_TOTALS)
        for tid in range(self.thread_cnt):
            stats = self.threads[tid]
            totals["txn_cnt"] += stats.txn_cnt
            totals["abort_cnt"] += stats.abort_cnt
            for name in _FLOAT_TOTALS:
                totals[name] += float(getattr(stats, name))
        return totals

    def _line(self, for_file: bool) -> str:
        t = self._totals()
        txn_cnt = t["txn_cnt"]
        latency_total = t["latency"] / BILLION
        if txn_cnt:
            latency = latency_total / txn_cnt
        else:
            latency = float("nan") if latency_total == 0 else float("inf")
        debug1 = t["debug1"] if for_file else t["debug1"] / BILLION
        debug5 = t["debug5"] / BILLION if for_file else t["debug5"]
        return (
            f"[summary] txn_cnt={txn_cnt}, abort_cnt={t['abort_cnt']}"
            f", run_time={t['run_time'] / BILLION:f}"
            f", time_wait={t['time_wait'] / BILLION:f}"
            f", time_ts_alloc={t['time_ts_alloc'] / BILLION:f}"
            f", time_man={(t['time_man'] - t['time_wait']) / BILLION:f}"
            f", time_index={t['time_index'] / BILLION:f}"
            f", time_abort={t['time_abort'] / BILLION:f}"
            f", time_cleanup={t['time_cleanup'] / BILLION:f}"
            f", latency={latency:f}"
            f", deadlock_cnt={self.deadlock}, cycle_detect={self.cycle_detect}"
            f", dl_detect_time={self.dl_detect_time / BILLION:f}"
            f", dl_wait_time={self.dl_wait_time / BILLION:f}"
            f", time_query={t['time_query'] / BILLION:f}"
            f", debug1={debug1:f}, debug2={t['debug2']:f}, debug3={t['debug3']:f}"
            f", debug4={t['debug4']:f}, debug5={debug5:f}"
        )

    def summary(self) -> str:
        """The one-line summary of all threads, as printed to the console."""
        return self._line(for_file=False)

    def print(self, output_file: Optional[str] = None) -> None:
        """Print per-thread counts and the summary; also write it to output_file."""
        for tid in range(self.thread_cnt):
            stats = self.threads[tid]
            print(f"[tid={tid}] txn_cnt={stats.txn_cnt},abort_cnt={stats.abort_cnt}")
        if output_file is not None:
            with open(output_file, "w", encoding="utf-8") as out:
                out.write(self._line(for_file=True) + "\n")
        print(self.summary())
        if self.prt_lat_distr:
            self.print_lat_distr(output_file)

    def print_lat_distr(self, output_file: Optional[str] = None) -> None:
        """Append the per-transaction samples of every thread to output_file."""
        if output_file is None:
            return
        with open(output_file, "a", encoding="utf-8") as out:
            for tid in range(self.thread_cnt):
                stats = self.threads[tid]
                count = stats.txn_cnt
                out.write(f"[all_debug1 thd={tid}] ")
                out.write("".join(f"{v}," for v in stats.all_debug1[:count]))
                out.write(f"\n[all_debug2 thd={tid}] ")
                out.write("".join(f"{v}," for v in stats.all_debug2[:count]))
                out.write("\n")