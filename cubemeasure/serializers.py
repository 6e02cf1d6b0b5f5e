# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# See the License at http://www.apache.org/licenses/LICENSE-2.0
# Distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND.

"""
The serializer implementation behind each serializer token.
"""

from typing import Dict
from typing import Type

from cubemeasure.constants import SerializerToken
from cubemeasure.datatypes import DataTypeSerializer
from cubemeasure.measures.basic import BasicSerializer
from cubemeasure.measures.bitmap import BitmapSerializer
from cubemeasure.measures.extended_column import ExtendedColumnSerializer
from cubemeasure.measures.hllc import HLLCSerializer
from cubemeasure.measures.raw import RawSerializer
from cubemeasure.measures.topn import TopNSerializer

SERIALIZERS: Dict[SerializerToken, Type[DataTypeSerializer]] = {
    SerializerToken.BASIC: BasicSerializer,
    SerializerToken.HLLC: HLLCSerializer,
    SerializerToken.BITMAP: BitmapSerializer,
    SerializerToken.TOPN: TopNSerializer,
    SerializerToken.RAW: RawSerializer,
    SerializerToken.EXTENDED_COLUMN: ExtendedColumnSerializer,
}
