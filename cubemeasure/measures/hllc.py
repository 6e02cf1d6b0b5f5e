# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# See the License at http://www.apache.org/licenses/LICENSE-2.0
# Distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND.

"""
HyperLogLog Count Distinct

Estimates the number of distinct values using HyperLogLog. The data type is
'hllc(p)', where 2^p registers are kept; more registers use more memory and
give a more accurate estimate, the standard error is about 1.04/sqrt(2^p).

Counters with the same precision can be merged by taking the maximum of each
register, which is how partial aggregations are combined. The query engine
can't merge counters itself, so COUNT_DISTINCT over 'hllc' is rewritten into
the HLL_DISTINCT_COUNT aggregate function.
"""

import hashlib
import math
from typing import Any
from typing import List

import numpy

from cubemeasure import config
from cubemeasure.constants import FUNC_COUNT_DISTINCT
from cubemeasure.constants import RewriteFunction
from cubemeasure.datatypes import DataType
from cubemeasure.datatypes import DataTypeSerializer
from cubemeasure.exceptions import IncorrectTypeError
from cubemeasure.exceptions import MeasureNotFoundError
from cubemeasure.exceptions import UnsupportedTypeError
from cubemeasure.measures.base import MeasureAggregator
from cubemeasure.measures.base import MeasureIngester
from cubemeasure.measures.base import MeasureType

MIN_PRECISION: int = 4
MAX_PRECISION: int = 16
HASH_BITS: int = 64


def hash_value(value: Any) -> int:
    """A stable 64 bit hash, the builtin hash() is salted per process."""
    if not isinstance(value, bytes):
        value = str(value).encode()
    return int.from_bytes(hashlib.blake2b(value, digest_size=8).digest(), "big")


def get_alpha(precision: int) -> float:
    if not MIN_PRECISION <= precision <= MAX_PRECISION:
        raise UnsupportedTypeError(
            f"HyperLogLog precision must be between {MIN_PRECISION} and {MAX_PRECISION}, got {precision}."
        )
    if precision == 4:
        return 0.673
    if precision == 5:
        return 0.697
    if precision == 6:
        return 0.709
    return 0.7213 / (1.0 + 1.079 / (1 << precision))


class HLLCounter:
    __slots__ = ("precision", "alpha", "m", "registers")

    def __init__(self, precision: int = None, registers: numpy.ndarray = None):
        if precision is None:
            precision = config.HLLC_DEFAULT_PRECISION
        self.alpha = get_alpha(precision)
        self.precision = precision
        self.m = 1 << precision
        if registers is None:
            registers = numpy.zeros(self.m, dtype=numpy.uint8)
        elif len(registers) != self.m:
            raise IncorrectTypeError(
                f"HyperLogLog with precision {precision} needs {self.m} registers, got {len(registers)}."
            )
        self.registers = registers

    def add(self, value: Any):
        hashed = hash_value(value)
        index = hashed >> (HASH_BITS - self.precision)
        remainder = hashed & ((1 << (HASH_BITS - self.precision)) - 1)
        # position of the leftmost set bit in the bits not used for the index
        rank = HASH_BITS - self.precision - remainder.bit_length() + 1
        if rank > self.registers[index]:
            self.registers[index] = rank

    def merge(self, other: "HLLCounter"):
        if other.precision != self.precision:
            raise IncorrectTypeError(
                f"Cannot merge HyperLogLog counters with precision {self.precision} and {other.precision}."
            )
        numpy.maximum(self.registers, other.registers, out=self.registers)

    def copy(self) -> "HLLCounter":
        return HLLCounter(self.precision, self.registers.copy())

    def count(self) -> int:
        estimate = self.alpha * self.m * self.m / numpy.sum(numpy.power(2.0, -self.registers.astype(numpy.float64)))
        zeros = int(numpy.count_nonzero(self.registers == 0))
        # small range correction, linear counting is more accurate here
        if estimate <= 2.5 * self.m and zeros > 0:
            estimate = self.m * math.log(self.m / zeros)
        return int(round(estimate))

    def __len__(self):
        return self.count()

    def __eq__(self, other):
        if not isinstance(other, HLLCounter):
            return False
        return self.precision == other.precision and numpy.array_equal(self.registers, other.registers)

    def __repr__(self):
        return f"<HLLCounter (precision={self.precision}, estimate={self.count()})>"


class HLLCIngester(MeasureIngester):
    def value_of(self, values: List[Any]) -> HLLCounter:
        counter = HLLCounter(_precision_of(self.data_type))
        if len(values) == 1:
            if values[0] is not None:
                counter.add(values[0])
        elif any(value is not None for value in values):
            # multiple columns are counted as one composite value
            counter.add("\x00".join("" if value is None else str(value) for value in values))
        return counter


class HLLCAggregator(MeasureAggregator):
    def aggregate(self, value: HLLCounter):
        if self.state is None:
            self.state = value.copy()
        else:
            self.state.merge(value)

    def result(self) -> int:
        if self.state is None:
            return 0
        return self.state.count()


class HLLCMeasureType(MeasureType):
    def validate(self, function_name: str, data_type: DataType):
        if function_name.upper() != FUNC_COUNT_DISTINCT:
            raise MeasureNotFoundError(function=function_name)
        if data_type.name != "hllc":
            raise UnsupportedTypeError(f"HyperLogLog measure can't use data type '{data_type}'.")
        get_alpha(_precision_of(data_type))

    def new_ingester(self) -> MeasureIngester:
        return HLLCIngester(self.data_type)

    def new_aggregator(self) -> MeasureAggregator:
        return HLLCAggregator()

    def needs_rewrite(self) -> bool:
        return True

    def get_rewrite_aggregate_function(self) -> RewriteFunction:
        return RewriteFunction.HLL_DISTINCT_COUNT


class HLLCSerializer(DataTypeSerializer):
    """One byte of precision followed by one byte per register."""

    def serialize(self, value: HLLCounter) -> bytes:
        return bytes([value.precision]) + value.registers.tobytes()

    def deserialize(self, buffer: bytes) -> HLLCounter:
        if not buffer:
            raise IncorrectTypeError("Cannot read a HyperLogLog counter from an empty buffer.")
        precision = buffer[0]
        registers = numpy.frombuffer(buffer, dtype=numpy.uint8, offset=1).copy()
        return HLLCounter(precision, registers)


def _precision_of(data_type: DataType) -> int:
    if data_type is None or data_type.precision is None:
        return config.HLLC_DEFAULT_PRECISION
    return data_type.precision
