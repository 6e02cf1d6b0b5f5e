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
Data Types

The return types of measures, written as they appear in a cube definition, for
example 'bigint', 'decimal(19,4)', 'hllc(10)' or 'topn(100,4)'. A type is a
lower-case name with up to two integer arguments, the precision and the scale.

Basic types are known from the start and map onto the engine's Orso types.
Measure types add their own names, and a serializer for their aggregation
state, when the measure provider registry is initialized.
"""

import re
import threading
from dataclasses import dataclass
from typing import Any
from typing import ClassVar
from typing import Dict
from typing import Optional
from typing import Set

from orso.types import OrsoTypes

from cubemeasure.constants import SerializerToken
from cubemeasure.exceptions import DataTypeNotFoundError
from cubemeasure.exceptions import InvalidInternalStateError

TYPE_PATTERN = re.compile(
    r"^\s*(?P<name>[a-z_][a-z0-9_]*)\s*(?:\(\s*(?P<precision>\d+)\s*(?:,\s*(?P<scale>\d+)\s*)?\))?\s*$"
)

# fmt:off
BASIC_TYPES: Dict[str, OrsoTypes] = {
    "any": OrsoTypes._MISSING_TYPE,
    "boolean": OrsoTypes.BOOLEAN,
    "tinyint": OrsoTypes.INTEGER,
    "smallint": OrsoTypes.INTEGER,
    "integer": OrsoTypes.INTEGER,
    "int": OrsoTypes.INTEGER,
    "bigint": OrsoTypes.INTEGER,
    "float": OrsoTypes.DOUBLE,
    "real": OrsoTypes.DOUBLE,
    "double": OrsoTypes.DOUBLE,
    "decimal": OrsoTypes.DECIMAL,
    "numeric": OrsoTypes.DECIMAL,
    "char": OrsoTypes.VARCHAR,
    "varchar": OrsoTypes.VARCHAR,
    "string": OrsoTypes.VARCHAR,
    "date": OrsoTypes.DATE,
    "timestamp": OrsoTypes.TIMESTAMP,
    "time": OrsoTypes.TIME,
    "binary": OrsoTypes.BLOB,
}
# fmt:on


@dataclass(frozen=True)
class DataType:
    name: str
    precision: Optional[int] = None
    scale: Optional[int] = None

    _registered: ClassVar[Set[str]] = set(BASIC_TYPES)
    _cache: ClassVar[Dict[str, "DataType"]] = {}
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __str__(self):
        if self.precision is None:
            return self.name
        if self.scale is None:
            return f"{self.name}({self.precision})"
        return f"{self.name}({self.precision},{self.scale})"

    @property
    def orso_type(self) -> OrsoTypes:
        """Measure states are opaque bytes to the rest of the engine."""
        return BASIC_TYPES.get(self.name, OrsoTypes.BLOB)

    @property
    def is_basic(self) -> bool:
        return self.name in BASIC_TYPES

    @property
    def is_integer(self) -> bool:
        return self.orso_type == OrsoTypes.INTEGER

    @property
    def is_number(self) -> bool:
        return self.orso_type in (OrsoTypes.INTEGER, OrsoTypes.DOUBLE, OrsoTypes.DECIMAL)

    @classmethod
    def register(cls, *names: str):
        with cls._lock:
            for name in names:
                cls._registered.add(name.lower())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name.lower() in cls._registered

    @classmethod
    def registered_names(cls):
        return sorted(cls._registered)

    @classmethod
    def get_type(cls, type_name: str) -> "DataType":
        """
        Parse a type name, e.g. 'hllc(10)', into a DataType.

        Raises:
            DataTypeNotFoundError: the name is malformed or isn't registered
        """
        if type_name is None:
            raise DataTypeNotFoundError(data_type=None)
        key = type_name.strip().lower()
        data_type = cls._cache.get(key)
        if data_type is not None:
            return data_type

        match = TYPE_PATTERN.match(key)
        if match is None or match.group("name") not in cls._registered:
            from cubemeasure.utils import suggest_alternative

            base_name = match.group("name") if match else key
            raise DataTypeNotFoundError(
                data_type=type_name, suggestion=suggest_alternative(base_name, cls._registered)
            )

        precision = match.group("precision")
        scale = match.group("scale")
        data_type = DataType(
            name=match.group("name"),
            precision=None if precision is None else int(precision),
            scale=None if scale is None else int(scale),
        )
        cls._cache[key] = data_type
        return data_type


class DataTypeSerializer:
    """
    Encodes and decodes the aggregation state of one data type to and from bytes.

    Implementations must be thread-safe, a single instance may be shared by
    concurrent aggregations.

    The class also holds the registry of which serializer a data type uses,
    serializers are registered by token and the implementation is looked up when
    an instance is created.
    """

    _serializers: Dict[str, SerializerToken] = {name: SerializerToken.BASIC for name in BASIC_TYPES}

    def __init__(self, data_type: DataType):
        self.data_type = data_type

    def serialize(self, value: Any) -> bytes:
        raise NotImplementedError("Subclasses must implement the serialize method.")

    def deserialize(self, buffer: bytes) -> Any:
        raise NotImplementedError("Subclasses must implement the deserialize method.")

    @classmethod
    def register(cls, data_type_name: str, token: SerializerToken):
        cls._serializers[data_type_name.lower()] = token

    @classmethod
    def token_for(cls, data_type_name: str) -> SerializerToken:
        token = cls._serializers.get(data_type_name.lower())
        if token is None:
            raise DataTypeNotFoundError(data_type=data_type_name)
        return token

    @classmethod
    def create(cls, data_type) -> "DataTypeSerializer":
        from cubemeasure.serializers import SERIALIZERS

        if isinstance(data_type, str):
            data_type = DataType.get_type(data_type)
        token = cls.token_for(data_type.name)
        implementation = SERIALIZERS.get(token)
        if implementation is None:  # pragma: no cover
            raise InvalidInternalStateError(f"No serializer implementation for '{token.name}'.")
        return implementation(data_type)
