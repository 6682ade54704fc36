"""Table schemas: named, fixed-size columns laid out back to back in a tuple."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

Field = Union[int, str]


@dataclass
class Column:
    """One column of a schema and its byte offset within a tuple."""

    id: int
    size: int
    index: int
    type: str
    name: str


class Catalog:
    """Schema of one table."""

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name
        self.columns: list[Column] = []
        self.tuple_size = 0
        self._ids: dict[str, int] = {}

    @property
    def field_cnt(self) -> int:
        return len(self.columns)

    def add_col(self, name: str, size: int, type: str) -> Column:
        """Append a column of the given byte size and return it."""
        column = Column(
            id=len(self.columns), size=size, index=self.tuple_size, type=type, name=name
        )
        self.columns.append(column)
        self._ids.setdefault(name, column.id)
        self.tuple_size += size
        return column

    def field_id(self, name: str) -> int:
        """Position of the first column with this name; KeyError if none."""
        try:
            return self._ids[name]
        except KeyError:
            raise KeyError(f"no column {name!r} in table {self.table_name!r}") from None

    def _column(self, field: Field) -> Column:
        if isinstance(field, str):
            return self.columns[self.field_id(field)]
        return self.columns[field]

    def field_type(self, field: Field) -> str:
        return self._column(field).type

    def field_name(self, field_id: int) -> str:
        return self.columns[field_id].name

    def field_size(self, field: Field) -> int:
        return self._column(field).size

    def field_index(self, field: Field) -> int:
        """Byte offset of the column within a tuple."""
        return self._column(field).index

    def print_schema(self) -> None:
        print(f"\n[Catalog] {self.table_name}")
        for column in self.columns:
            print(f"\t{column.name}\t{column.type}\t{column.size}")