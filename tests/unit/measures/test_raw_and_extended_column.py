import os
import sys

sys.path.insert(1, os.path.join(sys.path[0], "../../.."))

import pytest

from cubemeasure import config
from cubemeasure.datatypes import DataType
from cubemeasure.datatypes import DataTypeSerializer
from cubemeasure.exceptions import IncorrectTypeError
from cubemeasure.exceptions import MeasureNotFoundError
from cubemeasure.measures.extended_column import truncate_utf8
from cubemeasure.resolver import MeasureTypeResolver

RESOLVER = MeasureTypeResolver()


def test_raw_keeps_every_value():
    measure_type = RESOLVER.resolve("raw", "raw")
    assert not measure_type.needs_rewrite()
    ingester = measure_type.new_ingester()
    aggregator = measure_type.new_aggregator()
    assert aggregator.result() == []

    for value in [1, "two", None, 1]:
        aggregator.aggregate(ingester.value_of([value]))
    assert aggregator.result() == [1, "two", None, 1]


def test_raw_single_column():
    with pytest.raises(IncorrectTypeError):
        RESOLVER.resolve("RAW", "raw").new_ingester().value_of([1, 2])


def test_raw_serializer():
    serializer = DataTypeSerializer.create("raw")
    assert serializer.deserialize(serializer.serialize([1, "two", None, 3.5])) == [1, "two", None, 3.5]


def test_raw_validate():
    measure_type = RESOLVER.resolve("RAW", "raw")
    with pytest.raises(MeasureNotFoundError):
        measure_type.validate("SUM", DataType.get_type("raw"))


def test_truncate_utf8():
    assert truncate_utf8("seller", 3) == "sel"
    assert truncate_utf8("café", 4) == "caf"
    assert truncate_utf8("café", 5) == "café"


def test_extended_column():
    measure_type = RESOLVER.resolve("EXTENDED_COLUMN", "extendedcolumn(4)")
    assert not measure_type.needs_rewrite()
    ingester = measure_type.new_ingester()
    aggregator = measure_type.new_aggregator()

    aggregator.aggregate(ingester.value_of([1, "Alice Smith"]))
    aggregator.aggregate(ingester.value_of([1, None]))
    assert aggregator.result() == "Alic"


def test_extended_column_default_length():
    ingester = RESOLVER.resolve("EXTENDED_COLUMN", "extendedcolumn").new_ingester()
    value = ingester.value_of([1, "x" * (config.EXTENDED_COLUMN_DEFAULT_LENGTH + 10)])
    assert len(value) == config.EXTENDED_COLUMN_DEFAULT_LENGTH


def test_extended_column_needs_host_and_value():
    ingester = RESOLVER.resolve("EXTENDED_COLUMN", "extendedcolumn(10)").new_ingester()
    with pytest.raises(IncorrectTypeError):
        ingester.value_of(["only one"])


def test_extended_column_serializer():
    serializer = DataTypeSerializer.create("extendedcolumn(8)")
    assert serializer.deserialize(serializer.serialize("Bob")) == "Bob"
    assert serializer.deserialize(serializer.serialize(None)) is None
    assert serializer.serialize("a very long name") == b"a very l"


if __name__ == "__main__":  # pragma: no cover
    from tests.tools import run_tests

    run_tests()
