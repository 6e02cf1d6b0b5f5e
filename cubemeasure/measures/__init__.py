# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# See the License at http://www.apache.org/licenses/LICENSE-2.0
# Distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND.

from cubemeasure.constants import MeasureKind
from cubemeasure.measures.base import MeasureAggregator
from cubemeasure.measures.base import MeasureIngester
from cubemeasure.measures.base import MeasureType
from cubemeasure.measures.basic import BasicMeasureType
from cubemeasure.measures.bitmap import BitmapMeasureType
from cubemeasure.measures.dim_count_distinct import DimCountDistinctMeasureType
from cubemeasure.measures.extended_column import ExtendedColumnMeasureType
from cubemeasure.measures.hllc import HLLCMeasureType
from cubemeasure.measures.raw import RawMeasureType
from cubemeasure.measures.topn import TopNMeasureType

# the constructor of each kind of measure type
MEASURE_TYPES = {
    MeasureKind.BASIC: BasicMeasureType,
    MeasureKind.HLLC: HLLCMeasureType,
    MeasureKind.BITMAP: BitmapMeasureType,
    MeasureKind.TOPN: TopNMeasureType,
    MeasureKind.RAW: RawMeasureType,
    MeasureKind.EXTENDED_COLUMN: ExtendedColumnMeasureType,
    MeasureKind.DIM_COUNT_DISTINCT: DimCountDistinctMeasureType,
}

__all__ = (
    "MEASURE_TYPES",
    "MeasureAggregator",
    "MeasureIngester",
    "MeasureType",
)
