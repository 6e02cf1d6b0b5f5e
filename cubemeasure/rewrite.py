# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Rewrite Aggregate Functions

When a measure needs rewriting, the query planner replaces the aggregation in
the SQL with one of these functions. They follow the usual shape of a user
defined aggregate: `init` creates an accumulator, `add` folds a value into it,
`merge` combines two accumulators and `result` produces the final value.
"""

from typing import Any
from typing import Dict
from typing import Optional
from typing import Set

from cubemeasure.constants import RewriteFunction
from cubemeasure.exceptions import NotSupportedError
from cubemeasure.measures.bitmap import BitmapCounter
from cubemeasure.measures.hllc import HLLCounter


class HLLDistinctCountAggregateFunction:
    """Merges precomputed HyperLogLog counters."""

    @staticmethod
    def init() -> Optional[HLLCounter]:
        return None

    @staticmethod
    def add(accumulator: Optional[HLLCounter], value: HLLCounter) -> HLLCounter:
        if value is None:
            return accumulator
        if accumulator is None:
            return value.copy()
        accumulator.merge(value)
        return accumulator

    @staticmethod
    def merge(left: Optional[HLLCounter], right: Optional[HLLCounter]) -> Optional[HLLCounter]:
        return HLLDistinctCountAggregateFunction.add(left, right)

    @staticmethod
    def result(accumulator: Optional[HLLCounter]) -> int:
        return 0 if accumulator is None else accumulator.count()


class BitmapDistinctCountAggregateFunction:
    """Unions precomputed bitmaps."""

    @staticmethod
    def init() -> Optional[BitmapCounter]:
        return None

    @staticmethod
    def add(accumulator: Optional[BitmapCounter], value: BitmapCounter) -> BitmapCounter:
        if value is None:
            return accumulator
        if accumulator is None:
            return value.copy()
        accumulator.merge(value)
        return accumulator

    @staticmethod
    def merge(
        left: Optional[BitmapCounter], right: Optional[BitmapCounter]
    ) -> Optional[BitmapCounter]:
        return BitmapDistinctCountAggregateFunction.add(left, right)

    @staticmethod
    def result(accumulator: Optional[BitmapCounter]) -> int:
        return 0 if accumulator is None else accumulator.count()


class DimDistinctCountAggregateFunction:
    """Counts the distinct values of a dimension column, nulls are not counted."""

    @staticmethod
    def init() -> Set[Any]:
        return set()

    @staticmethod
    def add(accumulator: Set[Any], value: Any) -> Set[Any]:
        if value is not None:
            accumulator.add(value)
        return accumulator

    @staticmethod
    def merge(left: Set[Any], right: Set[Any]) -> Set[Any]:
        left |= right
        return left

    @staticmethod
    def result(accumulator: Set[Any]) -> int:
        return len(accumulator)


REWRITE_FUNCTIONS: Dict[RewriteFunction, type] = {
    RewriteFunction.HLL_DISTINCT_COUNT: HLLDistinctCountAggregateFunction,
    RewriteFunction.BITMAP_DISTINCT_COUNT: BitmapDistinctCountAggregateFunction,
    RewriteFunction.DIM_DISTINCT_COUNT: DimDistinctCountAggregateFunction,
}


def get_rewrite_function(token: RewriteFunction) -> type:
    implementation = REWRITE_FUNCTIONS.get(token)
    if implementation is None:
        raise NotSupportedError(f"No aggregate function implements '{token}'.")
    return implementation
