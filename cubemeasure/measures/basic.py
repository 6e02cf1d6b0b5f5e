# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# See the License at http://www.apache.org/licenses/LICENSE-2.0
# Distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND.

"""
Basic Measures

SUM, MIN, MAX and COUNT over the basic data types. This is the default measure
type, used for any function which has no provider of its own.
"""

import decimal
import struct
from typing import Any
from typing import List

import orjson
from orso.types import OrsoTypes

from cubemeasure.constants import FUNC_COUNT
from cubemeasure.constants import FUNC_MAX
from cubemeasure.constants import FUNC_MIN
from cubemeasure.constants import FUNC_SUM
from cubemeasure.datatypes import DataType
from cubemeasure.datatypes import DataTypeSerializer
from cubemeasure.exceptions import IncorrectTypeError
from cubemeasure.exceptions import MeasureNotFoundError
from cubemeasure.exceptions import NotSupportedError
from cubemeasure.exceptions import UnsupportedTypeError
from cubemeasure.measures.base import MeasureAggregator
from cubemeasure.measures.base import MeasureIngester
from cubemeasure.measures.base import MeasureType

BASIC_FUNCTIONS = {FUNC_SUM, FUNC_MIN, FUNC_MAX, FUNC_COUNT}

INTEGER_FORMAT = struct.Struct(">q")
DOUBLE_FORMAT = struct.Struct(">d")


def _parse(data_type: DataType, value: Any) -> Any:
    if data_type is None:
        return value
    try:
        if data_type.orso_type == OrsoTypes.INTEGER:
            return int(value)
        if data_type.orso_type == OrsoTypes.DOUBLE:
            return float(value)
        if data_type.orso_type == OrsoTypes.DECIMAL:
            number = decimal.Decimal(str(value))
            if data_type.scale is not None:
                number = number.quantize(decimal.Decimal(1).scaleb(-data_type.scale))
            return number
    except (ValueError, TypeError, decimal.InvalidOperation) as err:
        raise IncorrectTypeError(f"Cannot ingest '{value}' as {data_type}.") from err
    return value


class BasicMeasureIngester(MeasureIngester):
    def __init__(self, function_name: str, data_type: DataType = None):
        super().__init__(data_type)
        self.function_name = function_name

    def value_of(self, values: List[Any]) -> Any:
        if self.function_name == FUNC_COUNT:
            return 1
        if len(values) != 1:
            raise IncorrectTypeError(
                f"{self.function_name} expects one value per row, received {len(values)}."
            )
        value = values[0]
        if value is None:
            return None
        return _parse(self.data_type, value)


class _SumAggregator(MeasureAggregator):
    def aggregate(self, value):
        if value is None:
            return
        self.state = value if self.state is None else self.state + value


class _MinAggregator(MeasureAggregator):
    def aggregate(self, value):
        if value is None:
            return
        if self.state is None or value < self.state:
            self.state = value


class _MaxAggregator(MeasureAggregator):
    def aggregate(self, value):
        if value is None:
            return
        if self.state is None or value > self.state:
            self.state = value


class _CountAggregator(MeasureAggregator):
    def __init__(self):
        super().__init__()
        self.state = 0

    def aggregate(self, value):
        if value is not None:
            self.state += value

    def reset(self):
        self.state = 0


AGGREGATORS = {
    FUNC_SUM: _SumAggregator,
    FUNC_MIN: _MinAggregator,
    FUNC_MAX: _MaxAggregator,
    FUNC_COUNT: _CountAggregator,
}


class BasicMeasureType(MeasureType):
    def validate(self, function_name: str, data_type: DataType):
        function_name = function_name.upper()
        if function_name not in BASIC_FUNCTIONS:
            raise MeasureNotFoundError(function=function_name)
        if function_name == FUNC_SUM and not data_type.is_number:
            raise UnsupportedTypeError(f"SUM cannot be applied to '{data_type}'.")

    def new_ingester(self) -> MeasureIngester:
        return BasicMeasureIngester(self.function_name, self.data_type)

    def new_aggregator(self) -> MeasureAggregator:
        aggregator = AGGREGATORS.get(self.function_name)
        if aggregator is None:
            raise NotSupportedError(f"No aggregator for function '{self.function_name}'.")
        return aggregator()


class BasicSerializer(DataTypeSerializer):
    """
    Numbers are fixed width, decimals and strings are UTF-8 text and anything
    else is JSON. An empty buffer is a null.
    """

    def serialize(self, value: Any) -> bytes:
        if value is None:
            return b""
        orso_type = self.data_type.orso_type
        if orso_type == OrsoTypes.INTEGER:
            return INTEGER_FORMAT.pack(value)
        if orso_type == OrsoTypes.DOUBLE:
            return DOUBLE_FORMAT.pack(value)
        if orso_type in (OrsoTypes.DECIMAL, OrsoTypes.VARCHAR):
            return str(value).encode()
        return orjson.dumps(value, default=str)

    def deserialize(self, buffer: bytes) -> Any:
        if not buffer:
            return None
        orso_type = self.data_type.orso_type
        if orso_type == OrsoTypes.INTEGER:
            return INTEGER_FORMAT.unpack(buffer)[0]
        if orso_type == OrsoTypes.DOUBLE:
            return DOUBLE_FORMAT.unpack(buffer)[0]
        if orso_type == OrsoTypes.DECIMAL:
            return decimal.Decimal(bytes(buffer).decode())
        if orso_type == OrsoTypes.VARCHAR:
            return bytes(buffer).decode()
        return orjson.loads(buffer)
