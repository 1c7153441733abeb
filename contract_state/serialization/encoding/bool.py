# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Booleans take a single raw byte, they are never wrapped in a push-data element.

>>> se = Serializer.build_bytes_serializer()
>>> write_bool(se, True)
>>> write_bool(se, False)
>>> bytes(se.finalize()).hex()
'0100'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0100ff'))
>>> read_bool(de), read_bool(de)
(True, False)
>>> read_bool(de)
Traceback (most recent call last):
...
ValueError: invalid boolean byte 0xff
"""

from contract_state.serialization import Deserializer, Serializer

TRUE_BYTE: int = 0x01
FALSE_BYTE: int = 0x00


def write_bool(serializer: Serializer, value: bool) -> None:
    if not isinstance(value, bool):
        raise TypeError(f'expected a bool, got {type(value).__name__}')
    serializer.write_byte(TRUE_BYTE if value else FALSE_BYTE)


def read_bool(deserializer: Deserializer) -> bool:
    """ Read one boolean byte, anything other than `00` and `01` is a `ValueError`.
    """
    byte = deserializer.read_byte()
    if byte not in (TRUE_BYTE, FALSE_BYTE):
        raise ValueError(f'invalid boolean byte 0x{byte:02x}')
    return byte == TRUE_BYTE
