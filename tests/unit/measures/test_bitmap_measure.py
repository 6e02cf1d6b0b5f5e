import os
import sys

sys.path.insert(1, os.path.join(sys.path[0], "../../.."))

import pytest

from cubemeasure.constants import RewriteFunction
from cubemeasure.datatypes import DataType
from cubemeasure.datatypes import DataTypeSerializer
from cubemeasure.exceptions import IncorrectTypeError
from cubemeasure.exceptions import UnsupportedTypeError
from cubemeasure.measures.bitmap import BitmapCounter
from cubemeasure.resolver import MeasureTypeResolver

RESOLVER = MeasureTypeResolver()


def test_counter_is_exact():
    counter = BitmapCounter(range(10_000))
    counter.merge(BitmapCounter(range(5_000, 15_000)))
    assert counter.count() == 15_000
    assert len(counter) == 15_000


def test_counter_accepts_integer_strings():
    counter = BitmapCounter(["1", 2, "2"])
    assert counter.count() == 2


def test_counter_rejects_negative_and_non_integers():
    with pytest.raises(IncorrectTypeError):
        BitmapCounter([-1])
    with pytest.raises(IncorrectTypeError):
        BitmapCounter(["seller"])
    with pytest.raises(IncorrectTypeError):
        BitmapCounter([None])


def test_counter_rejects_values_too_large_to_store():
    counter = BitmapCounter([2**64 - 1])
    assert counter.count() == 1
    with pytest.raises(IncorrectTypeError):
        counter.add(2**64)

    ingester = RESOLVER.resolve("count_distinct", "bitmap").new_ingester()
    with pytest.raises(IncorrectTypeError):
        ingester.value_of([2**70])

    serializer = DataTypeSerializer.create("bitmap")
    assert serializer.deserialize(serializer.serialize(counter)) == counter

def test_measure():
    measure_type = RESOLVER.resolve("count_distinct", "bitmap")
    assert measure_type.needs_rewrite()
    assert measure_type.get_rewrite_aggregate_function() == RewriteFunction.BITMAP_DISTINCT_COUNT

    ingester = measure_type.new_ingester()
    aggregator = measure_type.new_aggregator()
    aggregator.bulk_aggregate(ingester.bulk_value_of([[1], [2], [None], [2], [7]]))
    assert aggregator.result() == 3


def test_ingester_single_column():
    ingester = RESOLVER.resolve("COUNT_DISTINCT", "bitmap").new_ingester()
    with pytest.raises(IncorrectTypeError):
        ingester.value_of([1, 2])


def test_aggregator_does_not_modify_input():
    measure_type = RESOLVER.resolve("COUNT_DISTINCT", "bitmap")
    first = BitmapCounter([1])
    aggregator = measure_type.new_aggregator()
    aggregator.aggregate(first)
    aggregator.aggregate(BitmapCounter([2]))
    assert first.count() == 1
    assert aggregator.result() == 2


def test_validate():
    measure_type = RESOLVER.resolve("COUNT_DISTINCT", "bitmap")
    measure_type.validate("COUNT_DISTINCT", DataType.get_type("bitmap"))
    with pytest.raises(UnsupportedTypeError):
        measure_type.validate("COUNT_DISTINCT", DataType.get_type("hllc"))


def test_serializer():
    serializer = DataTypeSerializer.create(DataType.get_type("bitmap"))
    counter = BitmapCounter([3, 1, 2, 2**40])
    buffer = serializer.serialize(counter)
    assert len(buffer) == 4 * 8
    assert serializer.deserialize(buffer) == counter
    assert serializer.deserialize(serializer.serialize(BitmapCounter())).count() == 0


if __name__ == "__main__":  # pragma: no cover
    from tests.tools import run_tests

    run_tests()
