# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# See the License at http://www.apache.org/licenses/LICENSE-2.0
# Distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND.

"""
Bitmap Count Distinct

Precise count distinct over non-negative integer values, the data type is
'bitmap'. The state is the set of values seen, merged by union. As with the
HyperLogLog measure, COUNT_DISTINCT over 'bitmap' is rewritten into an
aggregate function the query engine can run.
"""

from typing import Any
from typing import Iterable
from typing import List

import numpy

from cubemeasure.constants import FUNC_COUNT_DISTINCT
from cubemeasure.constants import RewriteFunction
from cubemeasure.datatypes import DataType
from cubemeasure.datatypes import DataTypeSerializer
from cubemeasure.exceptions import IncorrectTypeError
from cubemeasure.exceptions import MeasureNotFoundError
from cubemeasure.exceptions import UnsupportedTypeError
from cubemeasure.measures.base import MeasureAggregator
from cubemeasure.measures.base import MeasureIngester
from cubemeasure.measures.base import MeasureType

# values are stored as unsigned 64 bit integers
MAX_VALUE: int = 2**64 - 1


class BitmapCounter:
    __slots__ = ("values",)

    def __init__(self, values: Iterable[int] = None):
        self.values = set()
        if values is not None:
            for value in values:
                self.add(value)

    def add(self, value: Any):
        try:
            value = int(value)
        except (TypeError, ValueError) as err:
            raise IncorrectTypeError(f"Bitmap measures count integers, received '{value}'.") from err
        if value < 0:
            raise IncorrectTypeError(f"Bitmap measures count non-negative integers, received {value}.")
        if value > MAX_VALUE:
            raise IncorrectTypeError(
                f"Bitmap measures count integers no larger than {MAX_VALUE}, received {value}."
            )
        self.values.add(value)

    def merge(self, other: "BitmapCounter"):
        self.values |= other.values

    def copy(self) -> "BitmapCounter":
        counter = BitmapCounter()
        counter.values = set(self.values)
        return counter

    def count(self) -> int:
        return len(self.values)

    def __len__(self):
        return len(self.values)

    def __eq__(self, other):
        return isinstance(other, BitmapCounter) and self.values == other.values

    def __repr__(self):
        return f"<BitmapCounter (count={len(self.values)})>"


class BitmapIngester(MeasureIngester):
    def value_of(self, values: List[Any]) -> BitmapCounter:
        if len(values) != 1:
            raise IncorrectTypeError(
                f"Bitmap measures count a single column, received {len(values)} values."
            )
        counter = BitmapCounter()
        if values[0] is not None:
            counter.add(values[0])
        return counter


class BitmapAggregator(MeasureAggregator):
    def aggregate(self, value: BitmapCounter):
        if self.state is None:
            self.state = value.copy()
        else:
            self.state.merge(value)

    def result(self) -> int:
        if self.state is None:
            return 0
        return self.state.count()


class BitmapMeasureType(MeasureType):
    def validate(self, function_name: str, data_type: DataType):
        if function_name.upper() != FUNC_COUNT_DISTINCT:
            raise MeasureNotFoundError(function=function_name)
        if data_type.name != "bitmap":
            raise UnsupportedTypeError(f"Bitmap measure can't use data type '{data_type}'.")

    def new_ingester(self) -> MeasureIngester:
        return BitmapIngester(self.data_type)

    def new_aggregator(self) -> MeasureAggregator:
        return BitmapAggregator()

    def needs_rewrite(self) -> bool:
        return True

    def get_rewrite_aggregate_function(self) -> RewriteFunction:
        return RewriteFunction.BITMAP_DISTINCT_COUNT


class BitmapSerializer(DataTypeSerializer):
    """The sorted values as unsigned 64 bit integers."""

    def serialize(self, value: BitmapCounter) -> bytes:
        return numpy.array(sorted(value.values), dtype=numpy.uint64).tobytes()

    def deserialize(self, buffer: bytes) -> BitmapCounter:
        counter = BitmapCounter()
        counter.values = set(numpy.frombuffer(buffer, dtype=numpy.uint64).tolist())
        return counter
