# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# See the License at http://www.apache.org/licenses/LICENSE-2.0
# Distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND.

"""
Top N

Tracks the dimension values with the largest sum of a measure, e.g. the top 100
sellers by revenue. The data type is 'topn(n)', where n is the number of items
reported.

Rows are ingested as [measure value, dimension value, ...]. The counter holds
more items than it reports so merging partial results keeps items which are
individually small in each partition but large overall, once the counter
grows past that it is trimmed back to the largest items.

TOP_N is answered by the storage layer directly, it isn't rewritten.
"""

from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Tuple

import orjson

from cubemeasure import config
from cubemeasure.constants import FUNC_TOP_N
from cubemeasure.datatypes import DataType
from cubemeasure.datatypes import DataTypeSerializer
from cubemeasure.exceptions import IncorrectTypeError
from cubemeasure.exceptions import MeasureNotFoundError
from cubemeasure.exceptions import UnsupportedTypeError
from cubemeasure.measures.base import MeasureAggregator
from cubemeasure.measures.base import MeasureIngester
from cubemeasure.measures.base import MeasureType

# how many more items are tracked than are reported
RETAIN_RATIO: int = 2

Item = Tuple[Optional[str], ...]


class TopNCounter:
    __slots__ = ("capacity", "counts")

    def __init__(self, capacity: int = None):
        self.capacity = config.TOPN_DEFAULT_CAPACITY if capacity is None else capacity
        if self.capacity < 1:
            raise UnsupportedTypeError(
                f"Top N must track at least one item, received capacity {self.capacity}."
            )
        self.counts: Dict[Item, float] = {}

    def offer(self, item: Item, value: float = 1.0):
        self.counts[item] = self.counts.get(item, 0.0) + value
        if len(self.counts) > self.capacity * RETAIN_RATIO * 2:
            self.retain(self.capacity * RETAIN_RATIO)

    def merge(self, other: "TopNCounter"):
        for item, value in other.counts.items():
            self.counts[item] = self.counts.get(item, 0.0) + value
        self.retain(self.capacity * RETAIN_RATIO)

    def retain(self, size: int):
        if len(self.counts) > size:
            self.counts = dict(self.top(size))

    def top(self, size: int = None) -> List[Tuple[Item, float]]:
        if size is None:
            size = self.capacity
        return sorted(self.counts.items(), key=lambda pair: pair[1], reverse=True)[:size]

    def copy(self) -> "TopNCounter":
        counter = TopNCounter(self.capacity)
        counter.counts = dict(self.counts)
        return counter

    def __len__(self):
        return len(self.counts)

    def __eq__(self, other):
        return (
            isinstance(other, TopNCounter)
            and self.capacity == other.capacity
            and self.counts == other.counts
        )

    def __repr__(self):
        return f"<TopNCounter (capacity={self.capacity}, items={len(self.counts)})>"


class TopNIngester(MeasureIngester):
    def value_of(self, values: List[Any]) -> TopNCounter:
        if len(values) < 2:
            raise IncorrectTypeError(
                "TOP_N expects a measure value followed by at least one dimension value."
            )
        measure, *dimensions = values
        try:
            measure = 0.0 if measure is None else float(measure)
        except (TypeError, ValueError) as err:
            raise IncorrectTypeError(f"TOP_N cannot sum '{measure}'.") from err
        counter = TopNCounter(_capacity_of(self.data_type))
        counter.offer(tuple(None if d is None else str(d) for d in dimensions), measure)
        return counter


class TopNAggregator(MeasureAggregator):
    def aggregate(self, value: TopNCounter):
        if self.state is None:
            self.state = value.copy()
        else:
            self.state.merge(value)

    def result(self) -> List[Tuple[Item, float]]:
        if self.state is None:
            return []
        return self.state.top()


class TopNMeasureType(MeasureType):
    def validate(self, function_name: str, data_type: DataType):
        if function_name.upper() != FUNC_TOP_N:
            raise MeasureNotFoundError(function=function_name)
        if data_type.name != "topn":
            raise UnsupportedTypeError(f"Top N measure can't use data type '{data_type}'.")
        if data_type.precision is not None and data_type.precision < 1:
            raise UnsupportedTypeError("Top N must track at least one item.")

    def new_ingester(self) -> MeasureIngester:
        return TopNIngester(self.data_type)

    def new_aggregator(self) -> MeasureAggregator:
        return TopNAggregator()


class TopNSerializer(DataTypeSerializer):
    def serialize(self, value: TopNCounter) -> bytes:
        return orjson.dumps(
            {
                "capacity": value.capacity,
                "items": [[list(item), count] for item, count in value.counts.items()],
            }
        )

    def deserialize(self, buffer: bytes) -> TopNCounter:
        document = orjson.loads(buffer)
        counter = TopNCounter(document["capacity"])
        counter.counts = {tuple(item): count for item, count in document["items"]}
        return counter


def _capacity_of(data_type: DataType) -> int:
    if data_type is None or data_type.precision is None:
        return config.TOPN_DEFAULT_CAPACITY
    return data_type.precision
