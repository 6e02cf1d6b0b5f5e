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
Measure Type

A measure type is the behaviour behind one (aggregation function, data type)
pair of a cube definition:

- an ingester turns the raw column values of a row into an aggregation state
- an aggregator merges aggregation states, row by row or partition by partition
- when the query engine can't compute the measure itself, the measure is
  rewritten into a SQL aggregate function during query planning

Measure types are created by the resolver, a new instance for every request.
"""

import abc
from typing import Any
from typing import Iterable
from typing import List
from typing import Optional

from cubemeasure.constants import RewriteFunction
from cubemeasure.datatypes import DataType
from cubemeasure.exceptions import NotSupportedError


class MeasureIngester(abc.ABC):
    """Converts the raw values of a row into an aggregation state."""

    def __init__(self, data_type: Optional[DataType] = None):
        self.data_type = data_type

    @abc.abstractmethod
    def value_of(self, values: List[Any]) -> Any:
        pass

    def bulk_value_of(self, rows: Iterable[List[Any]]) -> List[Any]:
        return [self.value_of(row) for row in rows]


class MeasureAggregator(abc.ABC):
    """Accumulates aggregation states."""

    def __init__(self):
        self.state = None

    @abc.abstractmethod
    def aggregate(self, value: Any):
        pass

    def bulk_aggregate(self, values: Iterable[Any]):
        for value in values:
            self.aggregate(value)

    def get_state(self) -> Any:
        return self.state

    def reset(self):
        self.state = None

    def result(self) -> Any:
        """The final value of the measure, by default the state itself."""
        return self.state


class MeasureType(abc.ABC):
    def __init__(self, function_name: str, data_type: Optional[DataType] = None):
        self.function_name = function_name
        self.data_type = data_type

    def __repr__(self):
        return f"<{self.__class__.__name__} (function={self.function_name}, data_type={self.data_type})>"

    def validate(self, function_name: str, data_type: DataType):
        """Check this measure type can work with the function and data type."""

    @abc.abstractmethod
    def new_ingester(self) -> MeasureIngester:
        pass

    @abc.abstractmethod
    def new_aggregator(self) -> MeasureAggregator:
        pass

    def needs_rewrite(self) -> bool:
        """Does the query planner need to substitute a SQL aggregate for this measure."""
        return False

    def needs_rewrite_field(self) -> bool:
        """When rewritten, is the precomputed measure value passed to the substitute."""
        return True

    def get_rewrite_aggregate_function(self) -> RewriteFunction:
        raise NotSupportedError(
            f"{self.__class__.__name__} for '{self.function_name}' is not rewritten."
        )
