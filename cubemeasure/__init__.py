# isort: skip_file
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# See the License at http://www.apache.org/licenses/LICENSE-2.0
# Distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND.

"""
cubemeasure resolves the measure types of an OLAP cube: which implementation
ingests, aggregates and, where needed, rewrites a measure, given its aggregation
function and its return data type.

To get started:
    import cubemeasure
    measure_type = cubemeasure.resolve("COUNT_DISTINCT", "hllc(10)")

    ingester = measure_type.new_ingester()
    aggregator = measure_type.new_aggregator()
    for row in rows:
        aggregator.aggregate(ingester.value_of([row["seller_id"]]))
    print(aggregator.result())
"""

from typing import Union

from cubemeasure.__version__ import __author__
from cubemeasure.__version__ import __build__
from cubemeasure.__version__ import __version__

from cubemeasure.datatypes import DataType
from cubemeasure.datatypes import DataTypeSerializer
from cubemeasure.measures import MeasureType
from cubemeasure.registry import MeasureDescriptor
from cubemeasure.registry import ProviderRegistry
from cubemeasure.resolver import MeasureTypeResolver
from cubemeasure.resolver import default_resolver

__all__ = [
    "__author__",
    "__build__",
    "__version__",
    "DataType",
    "DataTypeSerializer",
    "MeasureDescriptor",
    "MeasureType",
    "MeasureTypeResolver",
    "ProviderRegistry",
    "default_resolver",
    "resolve",
    "resolve_no_rewrite_variant",
]


def resolve(function_name: str, data_type: Union[DataType, str, None] = None) -> MeasureType:
    """
    Resolve a measure type using the built-in measure providers.

    Parameters:
        function_name: str
            The aggregation function, e.g. 'COUNT_DISTINCT'.
        data_type: DataType or str, optional
            The return type of the measure, e.g. 'hllc(10)'. None when the type
            is not known yet, only `needs_rewrite` can be asked of the result.

    Returns:
        MeasureType
    """
    return default_resolver().resolve(function_name, data_type)


def resolve_no_rewrite_variant(
    function_name: str, data_type: Union[DataType, str, None] = None
) -> MeasureType:
    """Resolve the dimension based COUNT_DISTINCT measure type."""
    return default_resolver().resolve_no_rewrite_variant(function_name, data_type)
