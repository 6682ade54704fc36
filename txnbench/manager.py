"""Global timestamp allocation, minimum active timestamp, row latches and epochs."""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional

from txnbench.config import BUCKET_CNT, LOG_BATCH_TIME, MEM_ALLIGN, MIN_TS_INTVL, TsAlloc
from txnbench.helper import sys_clock
from txnbench.stats import Stats

UINT64_MAX = (1 << 64) - 1


class Manager:
    """Services shared by all worker threads."""

    def __init__(
        self,
        thread_cnt: int = 4,
        ts_alloc: TsAlloc = TsAlloc.CAS,
        ts_batch_alloc: bool = False,
        ts_batch_num: int = 1,
        stats: Optional[Stats] = None,
        clock: Callable[[], int] = sys_clock,
    ) -> None:
        self.thread_cnt = thread_cnt
        self.ts_alloc = ts_alloc
        self.ts_batch_alloc = ts_batch_alloc
        self.ts_batch_num = ts_batch_num
        self.stats = stats
        self.clock = clock
        self.timestamp = 1
        self.epoch = 0
        self._last_epoch_update_time = 0
        self._last_min_ts_time = 0
        self._min_ts = 0
        self._ts_lock = threading.Lock()
        self._mutexes = [threading.Lock() for _ in range(BUCKET_CNT)]
        self.all_ts = [UINT64_MAX] * thread_cnt
        self.txns: list[Any] = [None] * thread_cnt

    def get_ts(self, thread_id: int) -> int:
        """Allocate the next timestamp with the configured method."""
        if self.ts_batch_alloc and self.ts_alloc != TsAlloc.CAS:
            raise ValueError("batch timestamp allocation requires the CAS method")
        start = self.clock()
        if self.ts_alloc == TsAlloc.MUTEX:
            with self._ts_lock:
                self.timestamp += 1
                ts = self.timestamp
        elif self.ts_alloc == TsAlloc.CAS:
            step = self.ts_batch_num if self.ts_batch_alloc else 1
            with self._ts_lock:
                ts = self.timestamp
                self.timestamp += step
        elif self.ts_alloc == TsAlloc.HW:
            raise RuntimeError("hardware timestamps are not available")
        elif self.ts_alloc == TsAlloc.CLOCK:
            ts = self.clock() * self.thread_cnt + thread_id
        else:
            raise ValueError(f"unknown timestamp allocation method {self.ts_alloc}")
        stats = self.stats
        if stats is not None and stats.enabled and thread_id in stats.threads:
            stats.threads[thread_id].time_ts_alloc += self.clock() - start
        return ts

    def add_ts(self, thread_id: int, ts: int) -> None:
        """Record the timestamp of the transaction running on a thread."""
        current = self.all_ts[thread_id]
        if ts < current and current != UINT64_MAX:
            raise ValueError(f"timestamp {ts} is older than {current} on thread {thread_id}")
        self.all_ts[thread_id] = ts

    def get_min_ts(self, thread_id: int = 0) -> int:
        """Smallest active timestamp; only thread 0 recomputes it."""
        now = self.clock()
        if thread_id == 0 and now - self._last_min_ts_time > MIN_TS_INTVL:
            lowest = min(self.all_ts, default=UINT64_MAX)
            if lowest > self._min_ts:
                self._min_ts = lowest
        return self._min_ts

    def _hash(self, row: Any) -> int:
        addr = id(row) // MEM_ALLIGN
        return (addr * 1103515247 + 12345) % BUCKET_CNT

    def lock_row(self, row: Any) -> None:
        """Take the central latch that covers row."""
        self._mutexes[self._hash(row)].acquire()

    def release_row(self, row: Any) -> None:
        """Release the central latch that covers row; RuntimeError if not held."""
        self._mutexes[self._hash(row)].release()

    def update_epoch(self) -> None:
        """Advance the epoch once a log batch interval has passed."""
        now = self.clock()
        if now - self._last_epoch_update_time > LOG_BATCH_TIME * 1000 * 1000:
            self.epoch += 1
            self._last_epoch_update_time = now