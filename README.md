# chtypes

This package holds column types, values and column storage for a
columnar SQL database client that speaks the native binary protocol.
Every column can be written to bytes and read back from them.

## What is in it

- `chtypes.sql_types`
  - `SqlType` describes a column type. `str()` of a `SqlType` gives the
    name the server uses, for example `Nullable(UInt8)` or
    `DateTime64(3, 'UTC')`. It also has `level()`, `map_level()`,
    `is_datetime()` and `is_inner_low_cardinality()`.
  - `DateTimeType` says which kind of DateTime a column holds.
  - `SimpleAggFunc` lists the allowed aggregate functions.
    `SimpleAggFunc.parse("sumMap")` looks one up by name.
  - The records `Progress`, `ProfileInfo`, `TableColumns` and `ServerInfo`.
  - `sql_type_of(value)` infers a type from a Python value: `bool`, `int`,
    `float`, `str`/`bytes`, `date`, `datetime`, or a non-empty `dict`.
- `chtypes.decimal`
  - `Decimal` is a fixed-point number with a scale of at most 18.
  - `NoBits` is its storage width.
- `chtypes.enums`: `Enum8` and `Enum16`, enum values held by their numeric code.
- `chtypes.query`: `Query`, which holds SQL text and an optional id. It has
  `with_id()` and `map_sql()`.
- `chtypes.date_converter`: `days_since_epoch`, `date_stamp`,
  `datetime_stamp` and `date_sql_type`. These give the numbers that Date
  and 32-bit DateTime columns store.
- `chtypes.marshal`
  - `ScalarType` encodes fixed-width scalars little-endian.
  - `ByteWriter` and `ByteReader` handle raw bytes, scalars and
    length-prefixed strings. `ByteReader` raises `EOFError` when its
    data runs out.
- `chtypes.string_pool`: `StringPool`, an append-only store of byte strings.
- Columns: `VectorColumn` (`chtypes.numeric`), `StringColumn`
  (`chtypes.string_column`), `NullableColumn` (`chtypes.nullable`),
  `SimpleAggregateFunctionColumn` (`chtypes.simple_agg`),
  `LowCardinalityColumn` (`chtypes.low_cardinality`) and `MapColumn`
  (`chtypes.map_column`).
  - Each column has `sql_type()`, `push()`, `at()`, `len()`, `clone()`,
    `save(writer, start, end)` and a `load` classmethod.
  - Wrapping columns are loaded with a callable `loader(reader, n)` that
    reads the inner column.

## Installation

```
pip install chtypes
```

## Examples

Decimals compare by value, whatever their scale:

```python
from chtypes.decimal import Decimal

assert str(Decimal.of(2.1, 4)) == "2.1000"
assert Decimal.of(2.0, 4) == Decimal.of(2.0, 2)
assert Decimal.of(2, 4).internal() == 20000
```

Type names:

```python
from chtypes.sql_types import SqlType

assert str(SqlType("Nullable", inner=SqlType("UInt8"))) == "Nullable(UInt8)"
```

Save a string column to bytes and read it back. Values come back as `bytes`:

```python
from chtypes.marshal import ByteReader, ByteWriter
from chtypes.string_column import StringColumn

column = StringColumn(["foo", "bar"])
writer = ByteWriter()
column.save(writer, 0, len(column))

loaded = StringColumn.load(ByteReader(writer.getvalue()), 2)
assert loaded.at(1) == b"bar"
```

A nullable column of integers:

```python
from chtypes.marshal import ByteReader, ByteWriter, ScalarType
from chtypes.nullable import NullableColumn
from chtypes.numeric import VectorColumn

column = NullableColumn(VectorColumn(ScalarType.UINT32))
column.push(7)
column.push(None)

writer = ByteWriter()
column.save(writer, 0, len(column))
loaded = NullableColumn.load(
    ByteReader(writer.getvalue()),
    lambda reader, n: VectorColumn.load(reader, ScalarType.UINT32, n),
    2,
)
assert loaded.at(0) == 7 and loaded.at(1) is None
```

A LowCardinality column stores each distinct value once:

```python
from chtypes.low_cardinality import LowCardinalityColumn
from chtypes.sql_types import SqlType

column = LowCardinalityColumn.empty(SqlType("String"))
for text in ["a", "b", "a"]:
    column.push(text)
assert len(column.inner) == 2
assert column.at(2) == b"a"
```

A map column:

```python
from chtypes.map_column import MapColumn
from chtypes.sql_types import SqlType

column = MapColumn.from_dicts(SqlType("String"), SqlType("UInt8"), [{"a": 1}])
assert str(column.sql_type()) == "Map(String, UInt8)"
assert column.at(0) == {b"a": 1}
```

## Errors

- Malformed data raises `ValueError` on load, for example a wrong
  LowCardinality version or an unsupported global dictionary.
- Running out of data raises `EOFError`.
- Pushing a value of the wrong kind raises `TypeError`.
- Pushing a number that does not fit the column raises `OverflowError`.

## What it does not do

- It does not open connections, send queries, stream result blocks or
  manage a connection pool.
- It has no blocks or rows, and it does not compress.
- `SqlType` can describe Array, FixedString, Decimal, Enum, DateTime,
  IPv4, IPv6 and UUID types, but the package has no column classes that
  store them. Only the columns listed above exist.

The package has no runtime dependencies. To run the tests, install the
`test` extra and run `pytest`.