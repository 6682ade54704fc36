"""Tables and their rows, stored as fixed-layout byte tuples."""

from __future__ import annotations

import struct
from typing import Optional, Union

from txnbench.catalog import Catalog

Field = Union[int, str]
Value = Union[int, float, bytes, bytearray, memoryview]

_U64_LIMIT = 1 << 64
_I64_MIN = -(1 << 63)


def _encode_int(value: int) -> bytes:
    if 0 <= value < _U64_LIMIT:
        return value.to_bytes(8, "little", signed=False)
    if _I64_MIN <= value < 0:
        return value.to_bytes(8, "little", signed=True)
    raise ValueError(f"value {value} does not fit in 64 bits")


class Table:
    """A table: its schema and the number of rows handed out."""

    def __init__(self, schema: Catalog) -> None:
        self.schema = schema
        self.table_name = schema.table_name
        self._size = 0

    @property
    def table_size(self) -> int:
        return self._size

    def get_new_row(self, part_id: int = 0, row_id: int = 0) -> "Row":
        """Create a zeroed row of this table; the caller must index it."""
        self._size += 1
        return Row(self, part_id, row_id)


class Row:
    """One tuple of a table, or a free-standing buffer of a given size."""

    def __init__(
        self,
        table: Optional[Table] = None,
        part_id: int = 0,
        row_id: int = 0,
        *,
        size: Optional[int] = None,
    ) -> None:
        if size is None:
            if table is None:
                raise ValueError("a row needs a table or a size")
            size = table.schema.tuple_size
        self.table = table
        self.part_id = part_id
        self.row_id = row_id
        self.primary_key = 0
        self.data = bytearray(size)

    @property
    def schema(self) -> Catalog:
        if self.table is None:
            raise LookupError("row is not attached to a table")
        return self.table.schema

    @property
    def table_name(self) -> str:
        return self.schema.table_name

    @property
    def field_cnt(self) -> int:
        return self.schema.field_cnt

    @property
    def tuple_size(self) -> int:
        return self.schema.tuple_size

    def _span(self, field: Field) -> tuple[int, int]:
        schema = self.schema
        return schema.field_index(field), schema.field_size(field)

    def set_value(self, field: Field, value: Value) -> None:
        """Store value in a column given by position or name.

        Integers and floats are stored little-endian in 8 bytes, cut to the
        column's size; byte strings are copied and zero-padded.
        """
        pos, size = self._span(field)
        if isinstance(value, (bytes, bytearray, memoryview)):
            raw = bytes(value)
            if len(raw) > size:
                raise ValueError(f"{len(raw)} bytes do not fit in a {size}-byte column")
        elif isinstance(value, int):
            raw = _encode_int(value)
        elif isinstance(value, float):
            raw = struct.pack("<d", value)
        else:
            raise TypeError(f"cannot store {type(value).__name__} in a row")
        self.data[pos:pos + size] = raw[:size].ljust(size, b"\0")

    def get_value(self, field: Field) -> bytes:
        """Raw bytes of a column."""
        pos, size = self._span(field)
        return bytes(self.data[pos:pos + size])

    def _int_bytes(self, field: Field) -> bytes:
        pos, size = self._span(field)
        return bytes(self.data[pos:pos + min(size, 8)])

    def get_uint(self, field: Field) -> int:
        return int.from_bytes(self._int_bytes(field), "little", signed=False)

    def get_int(self, field: Field) -> int:
        return int.from_bytes(self._int_bytes(field), "little", signed=True)

    def get_double(self, field: Field) -> float:
        pos, size = self._span(field)
        if size < 8:
            raise ValueError(f"a {size}-byte column cannot hold a double")
        return struct.unpack_from("<d", self.data, pos)[0]

    def set_data(self, data: Union[bytes, bytearray, memoryview]) -> None:
        """Overwrite the start of the row with data."""
        if len(data) > len(self.data):
            raise ValueError(f"{len(data)} bytes do not fit in a {len(self.data)}-byte row")
        self.data[:len(data)] = data

    def copy(self, src: "Row") -> None:
        """Copy the tuple of src into this row."""
        self.set_data(src.data[:src.tuple_size])