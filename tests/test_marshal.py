import pytest
from hypothesis import given
from hypothesis import strategies as st

from chtypes.marshal import ByteReader, ByteWriter, ScalarType
from chtypes.sql_types import SqlType


def _int_range(bits, signed):
    if signed:
        return st.integers(min_value=-(2 ** (bits - 1)), max_value=2 ** (bits - 1) - 1)
    return st.integers(min_value=0, max_value=2**bits - 1)


STRATEGIES = {
    "UINT8": _int_range(8, False),
    "UINT16": _int_range(16, False),
    "UINT32": _int_range(32, False),
    "UINT64": _int_range(64, False),
    "UINT128": _int_range(128, False),
    "INT8": _int_range(8, True),
    "INT16": _int_range(16, True),
    "INT32": _int_range(32, True),
    "INT64": _int_range(64, True),
    "INT128": _int_range(128, True),
    "FLOAT32": st.floats(width=32, allow_nan=False),
    "FLOAT64": st.floats(allow_nan=False),
    "BOOL": st.booleans(),
}


@pytest.mark.parametrize("name", sorted(STRATEGIES))
@given(data=st.data())
def test_round_trip(name, data):
    scalar_type = ScalarType[name]
    value = data.draw(STRATEGIES[name])
    encoded = scalar_type.marshal(value)
    assert len(encoded) == scalar_type.size
    assert scalar_type.unmarshal(encoded) == value

    writer = ByteWriter()
    writer.write_scalar(scalar_type, value)
    assert writer.getvalue() == encoded
    reader = ByteReader(writer.getvalue())
    assert reader.read_scalar(scalar_type) == value


@pytest.mark.parametrize(
    "scalar_type, value, expected",
    [
        (ScalarType.UINT16, 0x0102, b"\x02\x01"),
        (ScalarType.INT8, -1, b"\xff"),
        (ScalarType.INT32, -2, b"\xfe\xff\xff\xff"),
        (ScalarType.FLOAT32, 1.0, b"\x00\x00\x80\x3f"),
        (ScalarType.BOOL, True, b"\x01"),
    ],
)
def test_little_endian_layout(scalar_type, value, expected):
    assert scalar_type.marshal(value) == expected


@pytest.mark.parametrize("name, type_name", [("UINT128", "UInt128"), ("BOOL", "Bool")])
def test_sql_type_names(name, type_name):
    sql_type = ScalarType[name].sql_type
    assert sql_type == SqlType(type_name)
    assert str(sql_type) == type_name


def test_out_of_range():
    with pytest.raises(OverflowError):
        ScalarType.UINT8.marshal(256)


def test_unmarshal_wrong_size():
    with pytest.raises(ValueError):
        ScalarType.UINT32.unmarshal(b"\x00\x00")


def test_writer_reader_round_trip():
    writer = ByteWriter()
    writer.write_scalar(ScalarType.UINT64, 42)
    writer.write_string("hello")
    writer.write_string(b"x" * 300)
    writer.write_bytes(b"\x07")
    reader = ByteReader(writer.getvalue())
    assert reader.read_scalar(ScalarType.UINT64) == 42
    assert reader.read_string() == b"hello"
    assert reader.read_string() == b"x" * 300
    assert reader.read_bytes(1) == b"\x07"


def test_string_length_prefix():
    writer = ByteWriter()
    writer.write_string(b"a" * 128)
    assert writer.getvalue()[:2] == b"\x80\x01"


def test_reader_eof():
    reader = ByteReader(b"\x01")
    with pytest.raises(EOFError):
        reader.read_scalar(ScalarType.UINT32)