# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# See the License at http://www.apache.org/licenses/LICENSE-2.0
# Distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND.

"""
Tokens which stand in for concrete implementations.

Descriptors and measure types refer to serializers and to SQL-side aggregate
functions through these tokens, the implementations are looked up in
`cubemeasure.serializers.SERIALIZERS` and `cubemeasure.rewrite.REWRITE_FUNCTIONS`.
"""

from enum import Enum
from enum import auto


class MeasureKind(Enum):
    """One tag per concrete measure type."""

    BASIC = auto()
    HLLC = auto()
    BITMAP = auto()
    TOPN = auto()
    RAW = auto()
    EXTENDED_COLUMN = auto()
    DIM_COUNT_DISTINCT = auto()


class SerializerToken(Enum):
    """The serializer for the aggregation state of a measure data type."""

    BASIC = auto()
    HLLC = auto()
    BITMAP = auto()
    TOPN = auto()
    RAW = auto()
    EXTENDED_COLUMN = auto()


class RewriteFunction(Enum):
    """The SQL aggregate function substituted for a measure during query planning."""

    HLL_DISTINCT_COUNT = auto()
    BITMAP_DISTINCT_COUNT = auto()
    DIM_DISTINCT_COUNT = auto()


# function names used by more than one module
FUNC_COUNT_DISTINCT: str = "COUNT_DISTINCT"
FUNC_TOP_N: str = "TOP_N"
FUNC_RAW: str = "RAW"
FUNC_EXTENDED_COLUMN: str = "EXTENDED_COLUMN"
FUNC_SUM: str = "SUM"
FUNC_MIN: str = "MIN"
FUNC_MAX: str = "MAX"
FUNC_COUNT: str = "COUNT"
