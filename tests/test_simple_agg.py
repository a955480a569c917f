from chtypes.marshal import ByteReader, ByteWriter, ScalarType
from chtypes.numeric import VectorColumn
from chtypes.simple_agg import SimpleAggregateFunctionColumn
from chtypes.sql_types import SimpleAggFunc


def test_sql_type_name():
    column = SimpleAggregateFunctionColumn(VectorColumn(ScalarType.UINT64), SimpleAggFunc.SUM)
    assert str(column.sql_type()) == "SimpleAggregateFunction(sum, UInt64)"


def test_push_and_at_delegate():
    inner = VectorColumn(ScalarType.UINT64)
    column = SimpleAggregateFunctionColumn(inner, SimpleAggFunc.MAX)
    column.push(10)
    column.push(20)
    assert len(column) == 2
    assert column.at(1) == 20
    assert inner.at(0) == 10


def test_save_matches_inner():
    inner = VectorColumn(ScalarType.INT32, [1, -2, 3])
    column = SimpleAggregateFunctionColumn(inner, SimpleAggFunc.ANY)
    ours, theirs = ByteWriter(), ByteWriter()
    column.save(ours, 0, 3)
    inner.save(theirs, 0, 3)
    assert ours.getvalue() == theirs.getvalue()


def test_round_trip():
    column = SimpleAggregateFunctionColumn(
        VectorColumn(ScalarType.UINT32, [4, 5, 6]), SimpleAggFunc.MIN
    )
    writer = ByteWriter()
    column.save(writer, 0, 3)
    loaded = SimpleAggregateFunctionColumn.load(
        ByteReader(writer.getvalue()),
        SimpleAggFunc.MIN,
        lambda r, n: VectorColumn.load(r, ScalarType.UINT32, n),
        3,
    )
    assert [loaded.at(i) for i in range(3)] == [4, 5, 6]
    assert loaded.sql_type() == column.sql_type()


def test_clone_is_independent():
    column = SimpleAggregateFunctionColumn(VectorColumn(ScalarType.UINT8, [1]), SimpleAggFunc.SUM)
    copy = column.clone()
    copy.push(2)
    assert len(column) == 1
    assert len(copy) == 2
    assert copy.func is SimpleAggFunc.SUM