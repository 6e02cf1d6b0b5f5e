# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# See the License at http://www.apache.org/licenses/LICENSE-2.0
# Distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND.

"""
Extended Column

Stores a column which is functionally dependent on a dimension (e.g. a seller's
name alongside the seller id) as a measure rather than as another dimension,
which keeps it out of the cuboid keys. Rows are ingested as
[host value, extended value]; the data type is 'extendedcolumn(n)' where n is
the most bytes kept of the extended value.
"""

from typing import Any
from typing import List
from typing import Optional

from cubemeasure import config
from cubemeasure.constants import FUNC_EXTENDED_COLUMN
from cubemeasure.datatypes import DataType
from cubemeasure.datatypes import DataTypeSerializer
from cubemeasure.exceptions import IncorrectTypeError
from cubemeasure.exceptions import MeasureNotFoundError
from cubemeasure.exceptions import UnsupportedTypeError
from cubemeasure.measures.base import MeasureAggregator
from cubemeasure.measures.base import MeasureIngester
from cubemeasure.measures.base import MeasureType


def truncate_utf8(value: str, length: int) -> str:
    """Cut a string to at most `length` bytes without splitting a character."""
    return value.encode()[:length].decode(errors="ignore")


class ExtendedColumnIngester(MeasureIngester):
    def value_of(self, values: List[Any]) -> Optional[str]:
        if len(values) != 2:
            raise IncorrectTypeError(
                f"EXTENDED_COLUMN expects a host value and an extended value, received {len(values)} values."
            )
        extended = values[1]
        if extended is None:
            return None
        return truncate_utf8(str(extended), _length_of(self.data_type))


class ExtendedColumnAggregator(MeasureAggregator):
    def aggregate(self, value: Optional[str]):
        # the extended value is the same for every row of a host value
        if value is not None:
            self.state = value


class ExtendedColumnMeasureType(MeasureType):
    def validate(self, function_name: str, data_type: DataType):
        if function_name.upper() != FUNC_EXTENDED_COLUMN:
            raise MeasureNotFoundError(function=function_name)
        if data_type.name != "extendedcolumn":
            raise UnsupportedTypeError(f"Extended column measure can't use data type '{data_type}'.")

    def new_ingester(self) -> MeasureIngester:
        return ExtendedColumnIngester(self.data_type)

    def new_aggregator(self) -> MeasureAggregator:
        return ExtendedColumnAggregator()


class ExtendedColumnSerializer(DataTypeSerializer):
    def serialize(self, value: Optional[str]) -> bytes:
        if value is None:
            return b""
        return truncate_utf8(value, _length_of(self.data_type)).encode()

    def deserialize(self, buffer: bytes) -> Optional[str]:
        if not buffer:
            return None
        return bytes(buffer).decode()


def _length_of(data_type: DataType) -> int:
    if data_type is None or data_type.precision is None:
        return config.EXTENDED_COLUMN_DEFAULT_LENGTH
    return data_type.precision
