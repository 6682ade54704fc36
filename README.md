# txnbench

`txnbench` holds the storage and system layer of an in-memory transaction
processing test bed: the pieces a workload needs to describe tables, store
rows, index them, hand out timestamps and collect run statistics. It is a
library; it has no runtime dependencies and needs Python 3.10 or later.

## Modules

- `txnbench.config`: the run configuration `Config` (a dataclass with every
  tunable parameter and its default), the enums `CCAlg`, `TsAlloc` and
  `TestCase`, `parse_args(argv, config)` for the short-option command line and
  `usage()` for its help text.
- `txnbench.helper`: `ItemId` (an index entry; entries under one key are
  linked through `next` and walked with `chain()`), `DataType`, `AccessType`,
  the linear congruential generator `MyRand`, and `merge_idx_key`,
  `key_to_part`, `get_thdid_from_txnid` and `sys_clock`.
- `txnbench.catalog`: table schemas, `Catalog` and `Column`, with column
  sizes, byte offsets and type names.
- `txnbench.table`: `Table`, which creates zeroed rows, and `Row`, whose
  fixed-layout bytes are written and read field by field (by position or name).
- `txnbench.index_btree`: `IndexBTree`, a B+ tree per partition; a key that
  is inserted again gets the new item put in front of its chain, and each
  thread has a cursor that `index_read` places and `index_next` advances.
- `txnbench.index_hash`: `IndexHash`, a fixed number of buckets per
  partition, each a chain of `BucketNode`s behind a `BucketHeader` latch.
- `txnbench.manager`: `Manager`, which hands out timestamps (mutex, counter
  or clock based), tracks the smallest active timestamp, holds striped row
  latches and advances a logging epoch.
- `txnbench.stats`: `ThreadStats`, `TmpStats` and `Stats`, which keep
  per-thread counters, fold a transaction's timings in on commit, drop them on
  abort, and produce the one-line summary report.

## Examples

Parsing options into a configuration:

```python
from txnbench.config import TsAlloc, parse_args

config = parse_args(["-t8", "-Gt1", "-r0.5", "--pre_abort=false"])
assert config.thread_cnt == 8
assert config.ts_alloc is TsAlloc.MUTEX
assert config.params["pre_abort"] == "false"
```

Unknown or malformed options raise `ValueError`; `-h` prints `usage()` and
raises `SystemExit`.

A schema, a row and a hash index over it:

```python
from txnbench.catalog import Catalog
from txnbench.helper import DataType, ItemId
from txnbench.index_hash import IndexHash
from txnbench.table import Table

schema = Catalog("accounts")
schema.add_col("id", 8, "uint64_t")
schema.add_col("balance", 8, "double")

table = Table(schema)
row = table.get_new_row(part_id=0, row_id=0)
row.set_value("id", 42)
row.set_value("balance", 1.5)
assert row.get_uint("id") == 42
assert row.get_double("balance") == 1.5

index = IndexHash(bucket_cnt=16)
index.index_insert(42, ItemId(DataType.ROW, row), part_id=0)
assert index.index_read(42).location is row
```

A B+ tree scan with a thread cursor:

```python
from txnbench.helper import ItemId
from txnbench.index_btree import IndexBTree

tree = IndexBTree(part_cnt=1)
for key in range(100):
    tree.index_insert(key, ItemId(location=key), part_id=0)

assert list(tree.keys(0)) == list(range(100))
assert tree.index_read(10, part_id=0, thd_id=0).location == 10
assert tree.index_next(thd_id=0).location == 11
```

Reading a missing key raises `KeyError` in both indexes.

Composite keys and timestamps:

```python
from txnbench.helper import key_to_part, merge_idx_key
from txnbench.manager import Manager

key = merge_idx_key(3, 7)             # (3 << 32) | 7
wid_did_cid = merge_idx_key(1, 2, 3)  # three 21-bit parts
assert key_to_part(key, 4, True) == key % 4
assert key_to_part(key, 4, False) == 0

manager = Manager(thread_cnt=2)
assert manager.get_ts(0) == 1
assert manager.get_ts(1) == 2
```

Key parts that do not fit their share of the 64 bits raise `ValueError`.

## What the package does not do

`txnbench` provides the building blocks only. It has no workloads (no YCSB
or TPC-C tables or queries), no worker threads or transaction loop, and no
implementations of the concurrency-control algorithms that `CCAlg` names;
`Config.cc_alg` is just a setting. It installs no command: `parse_args` and
`Stats.print` are meant to be called from a driver you write. Rows and
indexes live in memory only and nothing is stored on disk.