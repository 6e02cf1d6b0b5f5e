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
Measure Provider Registry

Each measure provider claims the aggregation function and the data type it
supports, which is how it is matched to a measure in a cube definition, e.g.
the HyperLogLog provider claims COUNT_DISTINCT and 'hllc' to match:

    {
        "name": "SELLER_CNT_HLL",
        "function": {
            "expression": "COUNT_DISTINCT",   <- function name
            "parameter": {"type": "column", "value": "SELLER_ID"},
            "returntype": "hllc(10)"          <- data type
        }
    }

Several providers may claim the same function with different data types. Any
function without a provider is handled by the default (basic) provider.

The registry is filled once. Every declaration is checked first, then each
provider's data type and serializer are registered with the data type
registry, and it is read-only afterwards.
"""

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict
from typing import Iterable
from typing import List
from typing import Mapping
from typing import Optional
from typing import Tuple

from cubemeasure.constants import FUNC_COUNT_DISTINCT
from cubemeasure.constants import FUNC_EXTENDED_COLUMN
from cubemeasure.constants import FUNC_RAW
from cubemeasure.constants import FUNC_TOP_N
from cubemeasure.constants import MeasureKind
from cubemeasure.constants import SerializerToken
from cubemeasure.datatypes import DataType
from cubemeasure.datatypes import DataTypeSerializer
from cubemeasure.exceptions import InvalidMeasureDeclarationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeasureDescriptor:
    """The claim of one measure provider."""

    function_name: str
    data_type_name: str
    serializer: Optional[SerializerToken]
    kind: MeasureKind

    def __str__(self):
        return f"{self.kind.name}({self.function_name}, {self.data_type_name})"


# fmt:off
BUILT_IN_DESCRIPTORS: Tuple[MeasureDescriptor, ...] = (
    MeasureDescriptor(FUNC_COUNT_DISTINCT, "hllc", SerializerToken.HLLC, MeasureKind.HLLC),
    MeasureDescriptor(FUNC_COUNT_DISTINCT, "bitmap", SerializerToken.BITMAP, MeasureKind.BITMAP),
    MeasureDescriptor(FUNC_TOP_N, "topn", SerializerToken.TOPN, MeasureKind.TOPN),
    MeasureDescriptor(FUNC_RAW, "raw", SerializerToken.RAW, MeasureKind.RAW),
    MeasureDescriptor(FUNC_EXTENDED_COLUMN, "extendedcolumn", SerializerToken.EXTENDED_COLUMN, MeasureKind.EXTENDED_COLUMN),
)

# the basic measure type handles any function and any basic data type
DEFAULT_DESCRIPTOR = MeasureDescriptor("*", "*", SerializerToken.BASIC, MeasureKind.BASIC)
# fmt:on


class ProviderRegistry:
    """
    Maps function names to the descriptors of the providers which claim them.

    `initialize` fills the registry, it is safe to call from several threads and
    only the first call does anything. Lookups read the filled, immutable
    mappings and don't take the lock.
    """

    def __init__(
        self,
        descriptors: Iterable[MeasureDescriptor] = BUILT_IN_DESCRIPTORS,
        default: MeasureDescriptor = DEFAULT_DESCRIPTOR,
    ):
        self._declared = tuple(descriptors)
        self._default_descriptor = default
        self._providers: Mapping[str, Tuple[MeasureDescriptor, ...]] = MappingProxyType({})
        self._default: Tuple[MeasureDescriptor, ...] = ()
        self._initialized = False
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self):
        if self._initialized:
            return
        # the check and the fill are one step, a second thread waits then finds it done
        with self._lock:
            if self._initialized:
                return

            # every declaration is checked before any data type is registered
            for descriptor in self._declared:
                function_name = descriptor.function_name
                if function_name != function_name.upper():
                    raise InvalidMeasureDeclarationError(
                        config_item="function_name",
                        provided_value=function_name,
                        provider=str(descriptor),
                    )
                data_type_name = descriptor.data_type_name
                if data_type_name != data_type_name.lower():
                    raise InvalidMeasureDeclarationError(
                        config_item="data_type_name",
                        provided_value=data_type_name,
                        provider=str(descriptor),
                    )

            providers: Dict[str, List[MeasureDescriptor]] = {}
            for descriptor in self._declared:
                data_type_name = descriptor.data_type_name
                DataType.register(data_type_name)
                if descriptor.serializer is not None:
                    DataTypeSerializer.register(data_type_name, descriptor.serializer)
                providers.setdefault(descriptor.function_name, []).append(descriptor)
                logger.debug("Registered measure provider %s", descriptor)

            self._providers = MappingProxyType(
                {name: tuple(descriptors) for name, descriptors in providers.items()}
            )
            self._default = (self._default_descriptor,)
            self._initialized = True

        logger.info(
            "Measure provider registry initialized with %i providers for %i functions",
            len(self._declared),
            len(self._providers),
        )

    def get(self, function_name: str) -> Optional[Tuple[MeasureDescriptor, ...]]:
        """The providers claiming a function, in registration order, or None."""
        self.initialize()
        return self._providers.get(function_name.upper())

    @property
    def default(self) -> Tuple[MeasureDescriptor, ...]:
        self.initialize()
        return self._default

    def candidates(self, function_name: str) -> Tuple[MeasureDescriptor, ...]:
        """The providers claiming a function, falling back to the default provider."""
        providers = self.get(function_name)
        if providers is None:
            return self.default
        return providers

    def function_names(self) -> List[str]:
        self.initialize()
        return list(self._providers.keys())

    def descriptors(self) -> List[MeasureDescriptor]:
        self.initialize()
        return [descriptor for providers in self._providers.values() for descriptor in providers]

    def __contains__(self, function_name: str) -> bool:
        return self.get(function_name) is not None

    def __repr__(self):
        state = "initialized" if self._initialized else "uninitialized"
        return f"<ProviderRegistry ({state}, functions={list(self._providers.keys())})>"
