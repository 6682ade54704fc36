"""Run-time configuration of the benchmark and its command-line parser."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Iterable, Optional

# Simulation and hardware.
PAGE_SIZE = 4096
CL_SIZE = 64
CPU_FREQ = 2
WARMUP = 0
STATS_ENABLE = True
TIME_ENABLE = True
MEM_ALLIGN = 8
THREAD_ALLOC = False
MEM_SIZE = 1 << 30
NO_FREE = False

# Concurrency control.
ROLL_BACK = True
BUCKET_CNT = 31
ABORT_BUFFER_SIZE = 10
ABORT_BUFFER_ENABLE = True
ENABLE_LATCH = False
BTREE_ORDER = 16
DL_LOOP_TRIAL = 100
MIN_TS_INTVL = 5_000_000
MAX_WRITE_SET = 10

# Logging.
LOG_BATCH_TIME = 10

# Benchmark.
MAX_ROW_PER_TXN = 64
MAX_TXN_PER_PART = 100
MAX_TUPLE_SIZE = 1024
SCAN_LEN = 20
FIRSTNAME_MINLEN = 8
FIRSTNAME_LEN = 16
LASTNAME_LEN = 16
DIST_PER_WARE = 10
TPCC_SMALL = False

DEFAULT_PARAMS = {
    "abort_buffer_enable": "true" if ABORT_BUFFER_ENABLE else "false",
    "write_copy_form": "data",
    "validation_lock": "no-wait",
    "pre_abort": "true",
    "atomic_timestamp": "false",
}


class TsAlloc(IntEnum):
    """Timestamp allocation method."""

    MUTEX = 1
    CAS = 2
    HW = 3
    CLOCK = 4


class CCAlg(IntEnum):
    """Concurrency control algorithm."""

    NO_WAIT = 1
    WAIT_DIE = 2
    DL_DETECT = 3
    TIMESTAMP = 4
    MVCC = 5
    HSTORE = 6
    OCC = 7
    TICTOC = 8
    SILO = 9
    VLL = 10
    HEKATON = 11


class TestCase(IntEnum):
    """Built-in test scenario selected with -A."""

    __test__ = False

    READ_WRITE = 0
    CONFLICT = 1


@dataclass
class Config:
    """All tunable parameters of a benchmark run."""

    abort_penalty: int = 100_000
    central_man: bool = False
    ts_alloc: TsAlloc = TsAlloc.CAS
    key_order: bool = False
    no_dl: bool = False
    timeout: int = 1_000_000
    dl_loop_detect: int = 1000
    ts_batch_alloc: bool = False
    ts_batch_num: int = 1

    part_alloc: bool = False
    mem_pad: bool = True
    cc_alg: CCAlg = CCAlg.TICTOC
    query_intvl: int = 1
    part_per_txn: int = 1
    perc_multi_part: float = 1.0
    read_perc: float = 0.9
    write_perc: float = 0.1
    zipf_theta: float = 0.6
    prt_lat_distr: bool = False
    part_cnt: int = 1
    virtual_part_cnt: int = 1
    thread_cnt: int = 4
    synth_table_size: int = 1024 * 40
    req_per_query: int = 16
    field_per_tuple: int = 10
    init_parallelism: int = 40

    num_wh: int = 1
    perc_payment: float = 0.5
    wh_update: bool = True
    output_file: Optional[str] = None
    test_case: TestCase = TestCase.READ_WRITE
    max_items: int = 10_000 if TPCC_SMALL else 100_000
    cust_per_dist: int = 2000 if TPCC_SMALL else 3000

    params: dict = field(default_factory=lambda: dict(DEFAULT_PARAMS))


_USAGE = """[usage]:
\t-pINT       ; PART_CNT
\t-vINT       ; VIRTUAL_PART_CNT
\t-tINT       ; THREAD_CNT
\t-qINT       ; QUERY_INTVL
\t-dINT       ; PRT_LAT_DISTR
\t-aINT       ; PART_ALLOC (0 or 1)
\t-mINT       ; MEM_PAD (0 or 1)
\t-GaINT      ; ABORT_PENALTY (in ms)
\t-GcINT      ; CENTRAL_MAN
\t-GtINT      ; TS_ALLOC
\t-GkINT      ; KEY_ORDER
\t-GnINT      ; NO_DL
\t-GoINT      ; TIMEOUT
\t-GlINT      ; DL_LOOP_DETECT
\t-GbINT      ; TS_BATCH_ALLOC
\t-GuINT      ; TS_BATCH_NUM
\t-o STRING   ; output file

  [YCSB]:
\t-cINT       ; PART_PER_TXN
\t-eINT       ; PERC_MULTI_PART
\t-rFLOAT     ; READ_PERC
\t-wFLOAT     ; WRITE_PERC
\t-zFLOAT     ; ZIPF_THETA
\t-sINT       ; SYNTH_TABLE_SIZE
\t-RINT       ; REQ_PER_QUERY
\t-fINT       ; FIELD_PER_TUPLE
  [TPCC]:
\t-nINT       ; NUM_WH
\t-TpFLOAT    ; PERC_PAYMENT
\t-TuINT      ; WH_UPDATE
  [TEST]:
\t-Ar         ; Test READ_WRITE
\t-Ac         ; Test CONFLIT
"""


def usage() -> str:
    """Return the help text listing every command-line option."""
    return _USAGE


_INT_RE = re.compile(r"\s*([+-]?\d+)")
_FLOAT_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _atoi(text: str) -> int:
    """Leading integer of text, 0 if there is none."""
    match = _INT_RE.match(text)
    return int(match.group(1)) if match else 0


def _atof(text: str) -> float:
    """Leading decimal number of text, 0.0 if there is none."""
    match = _FLOAT_RE.match(text)
    return float(match.group(1)) if match else 0.0


def _atob(text: str) -> bool:
    return _atoi(text) != 0


def _ts_alloc(text: str) -> TsAlloc:
    value = _atoi(text)
    try:
        return TsAlloc(value)
    except ValueError:
        raise ValueError(f"unknown timestamp allocation method {value}") from None


_Converter = Callable[[str], object]

_SIMPLE: dict[str, tuple[str, _Converter]] = {
    "a": ("part_alloc", _atob),
    "m": ("mem_pad", _atob),
    "q": ("query_intvl", _atoi),
    "c": ("part_per_txn", _atoi),
    "e": ("perc_multi_part", _atof),
    "r": ("read_perc", _atof),
    "w": ("write_perc", _atof),
    "z": ("zipf_theta", _atof),
    "d": ("prt_lat_distr", _atob),
    "p": ("part_cnt", _atoi),
    "v": ("virtual_part_cnt", _atoi),
    "t": ("thread_cnt", _atoi),
    "s": ("synth_table_size", _atoi),
    "R": ("req_per_query", _atoi),
    "f": ("field_per_tuple", _atoi),
    "n": ("num_wh", _atoi),
}

_GLOBAL: dict[str, tuple[str, _Converter]] = {
    "a": ("abort_penalty", _atoi),
    "c": ("central_man", _atob),
    "t": ("ts_alloc", _ts_alloc),
    "k": ("key_order", _atob),
    "n": ("no_dl", _atob),
    "o": ("timeout", _atoi),
    "l": ("dl_loop_detect", _atoi),
    "b": ("ts_batch_alloc", _atob),
    "u": ("ts_batch_num", _atoi),
}

_TPCC: dict[str, tuple[str, _Converter]] = {
    "p": ("perc_payment", _atof),
    "u": ("wh_update", _atob),
}

_TESTS = {"r": TestCase.READ_WRITE, "c": TestCase.CONFLICT}


def _apply(config: Config, table: dict, key: str, text: str) -> None:
    entry = table.get(key)
    if entry is not None:
        name, convert = entry
        setattr(config, name, convert(text))


def parse_args(argv: Optional[Iterable[str]] = None, config: Optional[Config] = None) -> Config:
    """Apply command-line options (without the program name) to config and return it.

    Raises ValueError for a malformed option and SystemExit after printing
    the help text for -h.
    """
    if config is None:
        config = Config()
    if argv is None:
        argv = sys.argv[1:]
    config.params.update(DEFAULT_PARAMS)

    args = iter(argv)
    for arg in args:
        if not arg.startswith("-"):
            raise ValueError(f"option expected, got {arg!r}")
        flag, rest = arg[1:2], arg[2:]
        if flag in _SIMPLE:
            _apply(config, _SIMPLE, flag, rest)
        elif flag == "G":
            _apply(config, _GLOBAL, rest[:1], rest[1:])
        elif flag == "T":
            _apply(config, _TPCC, rest[:1], rest[1:])
        elif flag == "A":
            if rest[:1] in _TESTS:
                config.test_case = _TESTS[rest[:1]]
        elif flag == "o":
            try:
                config.output_file = next(args)
            except StopIteration:
                raise ValueError("-o needs a file name") from None
        elif flag == "h":
            print(usage(), end="")
            raise SystemExit(0)
        elif flag == "-":
            name, sep, value = rest.partition("=")
            if not sep:
                raise ValueError(f"expected --name=value, got {arg!r}")
            if name not in config.params:
                raise ValueError(f"unknown parameter {name!r}")
            config.params[name] = value
        else:
            raise ValueError(f"unknown option {arg!r}")

    if config.thread_cnt < config.init_parallelism:
        config.init_parallelism = config.thread_cnt
    return config