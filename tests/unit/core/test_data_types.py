import os
import sys

sys.path.insert(1, os.path.join(sys.path[0], "../../.."))

import pytest
from orso.types import OrsoTypes

from cubemeasure.constants import SerializerToken
from cubemeasure.datatypes import DataType
from cubemeasure.datatypes import DataTypeSerializer
from cubemeasure.exceptions import DataTypeNotFoundError
from cubemeasure.registry import ProviderRegistry

ProviderRegistry().initialize()


# fmt:off
@pytest.mark.parametrize("type_name, name, precision, scale", [
    ("bigint", "bigint", None, None),
    ("BIGINT", "bigint", None, None),
    ("hllc(10)", "hllc", 10, None),
    (" hllc ( 12 ) ", "hllc", 12, None),
    ("decimal(19,4)", "decimal", 19, 4),
    ("topn(100, 4)", "topn", 100, 4),
    ("extendedcolumn(256)", "extendedcolumn", 256, None),
])
# fmt:on
def test_parse_type_names(type_name, name, precision, scale):
    data_type = DataType.get_type(type_name)
    assert data_type.name == name
    assert data_type.precision == precision
    assert data_type.scale == scale


def test_type_to_string():
    assert str(DataType.get_type("hllc(10)")) == "hllc(10)"
    assert str(DataType.get_type("decimal(19, 4)")) == "decimal(19,4)"
    assert str(DataType.get_type("raw")) == "raw"


def test_types_are_values():
    assert DataType.get_type("hllc(10)") == DataType("hllc", 10)
    assert DataType.get_type("HLLC(10)") is DataType.get_type("hllc(10)")
    assert DataType.get_type("hllc(10)") != DataType.get_type("hllc(12)")
    assert len({DataType.get_type("bitmap"), DataType.get_type("BITMAP")}) == 1


@pytest.mark.parametrize("type_name", ["hyperloglog", "hllc(", "hllc(a)", "decimal(1,2,3)", "", "12"])
def test_unknown_type_names(type_name):
    with pytest.raises(DataTypeNotFoundError):
        DataType.get_type(type_name)


def test_unknown_type_suggestion():
    with pytest.raises(DataTypeNotFoundError) as err:
        DataType.get_type("bigitn")
    assert err.value.suggestion == "bigint"
    assert "Did you mean 'bigint'?" in str(err.value)


def test_register_type():
    assert not DataType.is_registered("sketch")
    DataType.register("SKETCH")
    assert DataType.is_registered("sketch")
    assert "sketch" in DataType.registered_names()
    assert DataType.get_type("sketch(3)").precision == 3


def test_orso_types():
    assert DataType.get_type("bigint").orso_type == OrsoTypes.INTEGER
    assert DataType.get_type("double").orso_type == OrsoTypes.DOUBLE
    assert DataType.get_type("decimal(10,2)").orso_type == OrsoTypes.DECIMAL
    assert DataType.get_type("varchar").orso_type == OrsoTypes.VARCHAR
    # measure states are opaque to the engine
    assert DataType.get_type("hllc(10)").orso_type == OrsoTypes.BLOB


def test_type_properties():
    assert DataType.get_type("bigint").is_integer
    assert DataType.get_type("decimal").is_number
    assert not DataType.get_type("varchar").is_number
    assert DataType.get_type("date").is_basic
    assert not DataType.get_type("topn").is_basic


def test_serializer_registry():
    assert DataTypeSerializer.token_for("bigint") == SerializerToken.BASIC
    assert DataTypeSerializer.token_for("HLLC") == SerializerToken.HLLC
    with pytest.raises(DataTypeNotFoundError):
        DataTypeSerializer.token_for("no_such_type")


def test_serializer_base_is_abstract():
    serializer = DataTypeSerializer(DataType.get_type("bigint"))
    with pytest.raises(NotImplementedError):
        serializer.serialize(1)
    with pytest.raises(NotImplementedError):
        serializer.deserialize(b"")


if __name__ == "__main__":  # pragma: no cover
    from tests.tools import run_tests

    run_tests()
