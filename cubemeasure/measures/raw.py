# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# See the License at http://www.apache.org/licenses/LICENSE-2.0
# Distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND.

"""
Raw Measure

Keeps every value of a column, unaggregated, so detail rows can be read back
from a cube. The data type is 'raw'.
"""

from typing import Any
from typing import List

import orjson

from cubemeasure.constants import FUNC_RAW
from cubemeasure.datatypes import DataType
from cubemeasure.datatypes import DataTypeSerializer
from cubemeasure.exceptions import IncorrectTypeError
from cubemeasure.exceptions import MeasureNotFoundError
from cubemeasure.exceptions import UnsupportedTypeError
from cubemeasure.measures.base import MeasureAggregator
from cubemeasure.measures.base import MeasureIngester
from cubemeasure.measures.base import MeasureType


class RawIngester(MeasureIngester):
    def value_of(self, values: List[Any]) -> List[Any]:
        if len(values) != 1:
            raise IncorrectTypeError(f"RAW expects one value per row, received {len(values)}.")
        return [values[0]]


class RawAggregator(MeasureAggregator):
    def aggregate(self, value: List[Any]):
        if self.state is None:
            self.state = []
        self.state.extend(value)

    def result(self) -> List[Any]:
        return self.state or []


class RawMeasureType(MeasureType):
    def validate(self, function_name: str, data_type: DataType):
        if function_name.upper() != FUNC_RAW:
            raise MeasureNotFoundError(function=function_name)
        if data_type.name != "raw":
            raise UnsupportedTypeError(f"Raw measure can't use data type '{data_type}'.")

    def new_ingester(self) -> MeasureIngester:
        return RawIngester(self.data_type)

    def new_aggregator(self) -> MeasureAggregator:
        return RawAggregator()


class RawSerializer(DataTypeSerializer):
    """Values are stored as a JSON list, values JSON can't hold are stored as text."""

    def serialize(self, value: List[Any]) -> bytes:
        return orjson.dumps(value, default=str)

    def deserialize(self, buffer: bytes) -> List[Any]:
        return orjson.loads(buffer)
