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
This module implements the sign-magnitude little-endian format that the script language uses for numbers.

The magnitude is written little-endian with the least amount of bytes, the sign is carried by the highest bit of the
most significant byte. When that bit is already used by the magnitude an extra byte is appended just to hold the sign.

Zero is a special case: it is written as a single `00` byte instead of an empty sequence, so a push of it is never
empty. Reading accepts both forms, and also a "negative zero".

>>> to_sign_magnitude(5).hex()
'05'
>>> to_sign_magnitude(0).hex()
'00'
>>> to_sign_magnitude(-1).hex()
'81'
>>> to_sign_magnitude(128).hex()
'8000'
>>> to_sign_magnitude(-128).hex()
'8080'
>>> to_sign_magnitude(256).hex()
'0001'
>>> to_sign_magnitude(-255).hex()
'ff80'

>>> from_sign_magnitude(bytes.fromhex('8000'))
128
>>> from_sign_magnitude(bytes.fromhex('ff80'))
-255
>>> from_sign_magnitude(b'')
0
>>> from_sign_magnitude(b'\\x80')
0
"""

from contract_state.serialization.types import Buffer


def to_sign_magnitude(value: int) -> bytes:
    """ Convert an integer of any size to its minimal sign-magnitude little-endian representation.

    This module's docstring has more details and examples.
    """
    if value == 0:
        return b'\x00'
    negative = value < 0
    magnitude = -value if negative else value
    data = bytearray(magnitude.to_bytes((magnitude.bit_length() + 7) // 8, byteorder='little'))
    if data[-1] & 0x80:
        data.append(0x80 if negative else 0x00)
    elif negative:
        data[-1] |= 0x80
    return bytes(data)


def from_sign_magnitude(data: Buffer) -> int:
    """ Convert a sign-magnitude little-endian byte sequence to an integer.

    Non-minimal representations are accepted.
    """
    raw = bytearray(data)
    if not raw:
        return 0
    negative = bool(raw[-1] & 0x80)
    raw[-1] &= 0x7f
    magnitude = int.from_bytes(raw, byteorder='little')
    return -magnitude if negative else magnitude
