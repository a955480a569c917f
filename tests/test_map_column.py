import pytest

from chtypes.map_column import MapColumn
from chtypes.marshal import ByteReader, ByteWriter, ScalarType
from chtypes.nullable import NullableColumn
from chtypes.numeric import VectorColumn
from chtypes.sql_types import SqlType
from chtypes.string_column import StringColumn


def _u8_loader(reader, size):
    return VectorColumn.load(reader, ScalarType.UINT8, size)


def _string_loader(reader, size):
    return StringColumn.load(reader, size)


def test_write_and_read():
    column = MapColumn.from_dicts(
        SqlType("String"), SqlType("UInt8"), [{"test": 4, "foo": 5}]
    )
    writer = ByteWriter()
    column.save(writer, 0, len(column))
    data = writer.getvalue()

    loaded = MapColumn.load(ByteReader(data), _string_loader, _u8_loader, 1)
    assert len(loaded) == 1
    assert loaded.at(0) == {b"test": 4, b"foo": 5}
    assert str(loaded.sql_type()) == "Map(String, UInt8)"

    again = ByteWriter()
    loaded.save(again, 0, len(loaded))
    assert again.getvalue() == data


def test_encoded_layout():
    column = MapColumn.from_dicts(SqlType("UInt8"), SqlType("UInt8"), [{1: 2}])
    writer = ByteWriter()
    column.save(writer, 0, 1)
    assert writer.getvalue() == b"\x01" + b"\x00" * 7 + b"\x01\x02"


def test_double_iteration():
    column = MapColumn.from_dicts(SqlType("UInt8"), SqlType("UInt8"), [{1: 2}])
    for _ in range(2):
        assert [column.at(i) for i in range(len(column))] == [{1: 2}]


def test_iteration_simple_map():
    column = MapColumn.from_dicts(
        SqlType("String"), SqlType("UInt8"), [{"A": 1, "B": 2, "C": 3}]
    )
    assert column.at(0) == {b"A": 1, b"B": 2, b"C": 3}


def test_iteration_included_map():
    inner = SqlType("Map", key=SqlType("UInt16"), value=SqlType("UInt16"))
    column = MapColumn.from_dicts(
        SqlType("UInt16"),
        inner,
        [{10: {100: 3000}, 20: {800: 5000, 900: 6000}}],
    )
    assert column.at(0) == {10: {100: 3000}, 20: {800: 5000, 900: 6000}}
    assert str(column.sql_type()) == "Map(UInt16, Map(UInt16, UInt16))"


def test_iterate_map_with_optional_value():
    column = MapColumn(
        VectorColumn(ScalarType.UINT32),
        NullableColumn(VectorColumn(ScalarType.UINT32)),
    )
    column.push({1: 2, 3: None})
    assert column.at(0) == {1: 2, 3: None}
    assert str(column.sql_type()) == "Map(UInt32, Nullable(UInt32))"


def test_rows_are_separated_by_offsets():
    column = MapColumn.from_dicts(
        SqlType("UInt8"), SqlType("UInt8"), [{1: 1}, {}, {2: 2, 3: 3}]
    )
    assert column.offsets == [1, 1, 3]
    assert [column.at(i) for i in range(3)] == [{1: 1}, {}, {2: 2, 3: 3}]


def test_push_rejects_non_mapping():
    column = MapColumn.from_dicts(SqlType("UInt8"), SqlType("UInt8"), [])
    with pytest.raises(TypeError):
        column.push([1, 2])


def test_load_zero_rows():
    loaded = MapColumn.load(ByteReader(b""), _u8_loader, _u8_loader, 0)
    assert len(loaded) == 0
    assert len(loaded.keys) == 0


def test_clone_is_independent():
    column = MapColumn.from_dicts(SqlType("UInt8"), SqlType("UInt8"), [{1: 2}])
    copy = column.clone()
    copy.push({3: 4})
    assert len(column) == 1
    assert len(copy) == 2
    assert copy.at(1) == {3: 4}


def test_from_dicts_requires_empty_columns():
    with pytest.raises(ValueError):
        MapColumn.from_dicts(VectorColumn(ScalarType.UINT8, [1]), SqlType("UInt8"), [])


def test_mismatched_columns_rejected():
    with pytest.raises(ValueError):
        MapColumn(VectorColumn(ScalarType.UINT8, [1]), VectorColumn(ScalarType.UINT8))


def test_value_out_of_range():
    column = MapColumn.from_dicts(SqlType("UInt8"), SqlType("UInt8"), [])
    with pytest.raises(OverflowError):
        column.push({1: 300})