import pytest

from txnbench.catalog import Catalog
from txnbench.table import Row, Table


@pytest.fixture
def table():
    schema = Catalog("accounts")
    schema.add_col("id", 8, "uint64_t")
    schema.add_col("score", 8, "double")
    schema.add_col("small", 4, "int32_t")
    schema.add_col("name", 16, "string")
    return Table(schema)


def test_new_rows_count_and_size(table):
    row = table.get_new_row(part_id=0, row_id=5)
    table.get_new_row(part_id=0, row_id=6)
    assert table.table_size == 2
    assert len(row.data) == table.schema.tuple_size
    assert row.row_id == 5
    assert row.part_id == 0
    assert row.table_name == "accounts"
    assert row.field_cnt == 4


def test_uint_round_trip_by_position_and_name(table):
    row = table.get_new_row()
    row.set_value(0, 2**64 - 1)
    assert row.get_uint("id") == 2**64 - 1
    row.set_value("id", 12345)
    assert row.get_uint(0) == 12345


def test_negative_int_round_trip(table):
    row = table.get_new_row()
    row.set_value("id", -7)
    assert row.get_int("id") == -7


def test_double_round_trip(table):
    row = table.get_new_row()
    row.set_value("score", 3.5)
    assert row.get_double("score") == 3.5


def test_small_column_holds_small_values(table):
    row = table.get_new_row()
    row.set_value("small", 7)
    assert row.get_uint("small") == 7
    row.set_value("small", -1)
    assert row.get_int("small") == -1


def test_columns_do_not_overlap(table):
    row = table.get_new_row()
    row.set_value("id", 2**64 - 1)
    row.set_value("small", 9)
    row.set_value("score", 1.25)
    assert row.get_uint("id") == 2**64 - 1
    assert row.get_uint("small") == 9
    assert row.get_double("score") == 1.25


def test_bytes_are_zero_padded(table):
    row = table.get_new_row()
    row.set_value("name", b"alice")
    value = row.get_value("name")
    assert len(value) == 16
    assert value.rstrip(b"\0") == b"alice"


def test_bytes_too_long_for_column(table):
    row = table.get_new_row()
    with pytest.raises(ValueError):
        row.set_value("small", b"12345")


def test_int_out_of_range(table):
    row = table.get_new_row()
    with pytest.raises(ValueError):
        row.set_value("id", 2**64)


def test_double_needs_eight_bytes(table):
    row = table.get_new_row()
    with pytest.raises(ValueError):
        row.get_double("small")


def test_unknown_column(table):
    row = table.get_new_row()
    with pytest.raises(KeyError):
        row.set_value("missing", 1)


def test_copy_transfers_tuple(table):
    src = table.get_new_row()
    src.set_value("id", 99)
    src.set_value("name", b"bob")
    dst = table.get_new_row()
    dst.copy(src)
    assert dst.data == src.data


def test_copy_into_larger_buffer(table):
    src = table.get_new_row()
    src.set_value("id", 4)
    buffer = Row(size=1024)
    buffer.copy(src)
    assert bytes(buffer.data[: table.schema.tuple_size]) == bytes(src.data)
    assert len(buffer.data) == 1024


def test_set_data_too_long(table):
    row = table.get_new_row()
    with pytest.raises(ValueError):
        row.set_data(bytes(len(row.data) + 1))


def test_row_needs_table_or_size():
    with pytest.raises(ValueError):
        Row()


def test_detached_row_has_no_schema():
    row = Row(size=8)
    with pytest.raises(LookupError):
        row.get_uint(0)