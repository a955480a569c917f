import pytest

from chtypes.marshal import ByteReader, ByteWriter
from chtypes.string_column import StringColumn


def test_sql_type_name():
    assert str(StringColumn().sql_type()) == "String"


def test_at_returns_bytes():
    column = StringColumn(["abc", b"xyz"])
    assert column.at(0) == b"abc"
    assert column.at(1) == b"xyz"


def test_text_is_utf8():
    column = StringColumn(["é"])
    assert column.at(0) == "é".encode("utf-8")


def test_wire_bytes_length_prefixed():
    writer = ByteWriter()
    StringColumn(["hi"]).save(writer, 0, 1)
    assert writer.getvalue() == b"\x02hi"


def test_round_trip():
    values = ["", "one", "two", "a longer string of text"]
    column = StringColumn(values)
    writer = ByteWriter()
    column.save(writer, 0, len(column))
    loaded = StringColumn.load(ByteReader(writer.getvalue()), len(values))
    assert [loaded.at(i) for i in range(len(loaded))] == [v.encode() for v in values]


def test_save_subrange():
    column = StringColumn(["a", "b", "c"])
    writer = ByteWriter()
    column.save(writer, 1, 2)
    assert StringColumn.load(ByteReader(writer.getvalue()), 1).at(0) == b"b"


def test_push_many():
    column = StringColumn()
    for i in range(300):
        column.push(f"text-{i}")
    assert len(column) == 300
    assert column.at(299) == b"text-299"


def test_push_wrong_type():
    with pytest.raises(TypeError):
        StringColumn().push(5)


def test_clone_is_independent():
    column = StringColumn(["a"])
    copy = column.clone()
    copy.push("b")
    assert len(column) == 1
    assert copy.at(0) == b"a"
    assert copy.at(1) == b"b"


def test_load_truncated():
    with pytest.raises(EOFError):
        StringColumn.load(ByteReader(b"\x05ab"), 1)