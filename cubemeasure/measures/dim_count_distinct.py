# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# See the License at http://www.apache.org/licenses/LICENSE-2.0
# Distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND.

"""
Dimension Count Distinct

COUNT_DISTINCT over a column which is a dimension of the cube. Nothing is
precomputed, the distinct values are already the group keys of the cuboid, so
there is nothing to ingest or aggregate; the query is rewritten into the
DIM_DISTINCT_COUNT aggregate function over the dimension column itself.

This measure type shares its function name with the count distinct measures and
is never chosen by the resolver's data type matching, it is only created on
request.
"""

from cubemeasure.constants import RewriteFunction
from cubemeasure.exceptions import NotSupportedError
from cubemeasure.measures.base import MeasureAggregator
from cubemeasure.measures.base import MeasureIngester
from cubemeasure.measures.base import MeasureType


class DimCountDistinctMeasureType(MeasureType):
    def new_ingester(self) -> MeasureIngester:
        raise NotSupportedError("No ingester for dimension count distinct.")

    def new_aggregator(self) -> MeasureAggregator:
        raise NotSupportedError("No aggregator for dimension count distinct.")

    def needs_rewrite(self) -> bool:
        return True

    def needs_rewrite_field(self) -> bool:
        return False

    def get_rewrite_aggregate_function(self) -> RewriteFunction:
        return RewriteFunction.DIM_DISTINCT_COUNT
