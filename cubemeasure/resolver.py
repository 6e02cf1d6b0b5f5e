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
Measure Type Resolver

Finds the measure type for an aggregation function and a data type.

    resolver = MeasureTypeResolver(ProviderRegistry())
    measure_type = resolver.resolve("COUNT_DISTINCT", "hllc(10)")

Function names are case insensitive. When only one provider claims the function
it is used for any data type; when several do, the one claiming the data type
is used. Functions no provider claims use the basic measure type.

Early in parsing a query the data type of a measure isn't known and the only
thing the planner needs is whether the measure is rewritten; resolving with no
data type returns a stand-in measure type which answers only that.
"""

import logging
import threading
from typing import List
from typing import Optional
from typing import Sequence
from typing import Union

from cubemeasure import config
from cubemeasure.constants import FUNC_COUNT_DISTINCT
from cubemeasure.constants import MeasureKind
from cubemeasure.constants import RewriteFunction
from cubemeasure.datatypes import DataType
from cubemeasure.exceptions import InvalidInternalStateError
from cubemeasure.exceptions import MeasureConsensusError
from cubemeasure.exceptions import NotSupportedError
from cubemeasure.measures import MEASURE_TYPES
from cubemeasure.measures import MeasureAggregator
from cubemeasure.measures import MeasureIngester
from cubemeasure.measures import MeasureType
from cubemeasure.registry import MeasureDescriptor
from cubemeasure.registry import ProviderRegistry

logger = logging.getLogger(__name__)


def create_measure_type(
    descriptor: MeasureDescriptor, function_name: str, data_type: Optional[DataType]
) -> MeasureType:
    measure_type = MEASURE_TYPES.get(descriptor.kind)
    if measure_type is None:  # pragma: no cover
        raise InvalidInternalStateError(f"No measure type implements '{descriptor.kind.name}'.")
    return measure_type(function_name, data_type)


class NeedsRewriteOnlyMeasureType(MeasureType):
    """
    Stands in for a measure type before its data type is known.

    Every provider of the function is asked whether it needs rewriting, they
    must all give the same answer. Nothing other than `needs_rewrite` is
    available.
    """

    def __init__(self, function_name: str, descriptors: Sequence[MeasureDescriptor]):
        super().__init__(function_name, None)
        self._needs_rewrite: Optional[bool] = None
        for descriptor in descriptors:
            probe = create_measure_type(descriptor, function_name, None).needs_rewrite()
            if self._needs_rewrite is None:
                self._needs_rewrite = probe
            elif self._needs_rewrite != probe:
                logger.error("needs_rewrite of providers %s does not have consensus", descriptors)
                raise MeasureConsensusError(function_name, descriptors)

    def needs_rewrite(self) -> bool:
        if self._needs_rewrite is None:
            raise InvalidInternalStateError(
                f"No provider answered needs_rewrite for '{self.function_name}'."
            )
        return self._needs_rewrite

    def needs_rewrite_field(self) -> bool:
        raise NotSupportedError("needs_rewrite_field is not available before the data type is known.")

    def new_ingester(self) -> MeasureIngester:
        raise NotSupportedError("An ingester is not available before the data type is known.")

    def new_aggregator(self) -> MeasureAggregator:
        raise NotSupportedError("An aggregator is not available before the data type is known.")

    def get_rewrite_aggregate_function(self) -> RewriteFunction:
        raise NotSupportedError(
            "The rewrite function is not available before the data type is known."
        )


class MeasureTypeResolver:
    def __init__(self, registry: ProviderRegistry = None, eager: bool = True):
        self.registry = registry or ProviderRegistry()
        if eager:
            self.registry.initialize()

    def resolve(
        self, function_name: str, data_type: Union[DataType, str, None] = None
    ) -> MeasureType:
        """
        Create the measure type for a function and data type.

        Parameters:
            function_name: str
                The aggregation function, any case, e.g. 'count_distinct'
            data_type: DataType, str or None
                The return type of the measure, or its name e.g. 'hllc(10)'; None
                when the data type isn't known yet

        Returns:
            A new MeasureType; a NeedsRewriteOnlyMeasureType when there is no data type

        Raises:
            DataTypeNotFoundError: the data type name isn't known
            MeasureConsensusError: with no data type, the providers disagree on needs_rewrite
            InvalidInternalStateError: several providers claim the function but none the data type
        """
        # provider data type names are only known once the registry is filled
        self.registry.initialize()
        if isinstance(data_type, str):
            data_type = DataType.get_type(data_type)

        function_name = function_name.upper()
        candidates = self.registry.candidates(function_name)

        # early in parsing the data type is unknown, only needs_rewrite can be answered
        if data_type is None:
            return NeedsRewriteOnlyMeasureType(function_name, candidates)

        # usually only one provider claims a function
        if len(candidates) == 1:
            return create_measure_type(candidates[0], function_name, data_type)

        # otherwise the data type tells them apart
        for descriptor in candidates:
            if descriptor.data_type_name == data_type.name:
                return create_measure_type(descriptor, function_name, data_type)

        logger.error(
            "No provider of '%s' claims data type '%s', providers are %s",
            function_name,
            data_type,
            [str(c) for c in candidates],
        )
        raise InvalidInternalStateError(
            f"No measure provider for '{function_name}' claims data type '{data_type.name}'."
        )

    def resolve_no_rewrite_variant(
        self, function_name: str, data_type: Union[DataType, str, None] = None
    ) -> MeasureType:
        """
        Create the dimension based count distinct measure type, which doesn't
        pass precomputed values to its rewrite function. It shares COUNT_DISTINCT
        with the other count distinct providers so it is never resolved by data
        type and has to be asked for.
        """
        if function_name.upper() != FUNC_COUNT_DISTINCT:
            raise NotSupportedError(f"No measure type without rewrite fields for '{function_name}'.")
        self.registry.initialize()
        if isinstance(data_type, str):
            data_type = DataType.get_type(data_type)
        return MEASURE_TYPES[MeasureKind.DIM_COUNT_DISTINCT](FUNC_COUNT_DISTINCT, data_type)

    def collect(self) -> List[dict]:
        """Describe each registered provider."""
        providers = []
        for descriptor in self.registry.descriptors() + list(self.registry.default):
            probe = create_measure_type(descriptor, descriptor.function_name, None)
            providers.append(
                {
                    "function": descriptor.function_name,
                    "data_type": descriptor.data_type_name,
                    "kind": descriptor.kind.name,
                    "serializer": None if descriptor.serializer is None else descriptor.serializer.name,
                    "needs_rewrite": probe.needs_rewrite(),
                }
            )
        return providers

    def catalogue(self):
        """The registered providers as a table."""
        import pyarrow

        return pyarrow.Table.from_pylist(self.collect())


_default_resolver: Optional[MeasureTypeResolver] = None
_default_lock = threading.Lock()


def default_resolver() -> MeasureTypeResolver:
    """The process wide resolver over the built-in providers, created on first use."""
    global _default_resolver
    if _default_resolver is None:
        with _default_lock:
            if _default_resolver is None:
                _default_resolver = MeasureTypeResolver(
                    ProviderRegistry(), eager=config.EAGER_REGISTRY_INIT
                )
    return _default_resolver
