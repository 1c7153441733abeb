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

r"""
This module implements the push-data framing used by the script language to put a byte string on the stack.

The length prefix depends on the size of the payload:

- 0 bytes: the single opcode `OP_0` (0x00)
- 1 to 75 bytes: one byte with the length, which is itself the opcode
- 76 to 255 bytes: `OP_PUSHDATA1` followed by a 1-byte length
- 256 to 65535 bytes: `OP_PUSHDATA2` followed by a 2-byte little-endian length
- up to 2**32 - 1 bytes: `OP_PUSHDATA4` followed by a 4-byte little-endian length

>>> se = Serializer.build_bytes_serializer()
>>> encode_pushdata(se, b'')  # writes 00
>>> encode_pushdata(se, b'\x05')  # writes 0105
>>> encode_pushdata(se, b'\xab' * 76)  # writes 4c4cabab...
>>> data = bytes(se.finalize())
>>> data[:5].hex()
'0001054c4c'
>>> len(data)
81

>>> de = Deserializer.build_bytes_deserializer(data)
>>> decode_pushdata(de)
b''
>>> decode_pushdata(de)
b'\x05'
>>> len(decode_pushdata(de))
76
>>> de.finalize()

>>> pushdata_size(300)
303

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('05aabb'))
>>> try:
...     decode_pushdata(de)
... except SerializationError as e:
...     print(*e.args)
not enough bytes to read
"""

from typing import Optional

from contract_state.scripts.opcode import MAX_DIRECT_PUSH_LENGTH, Opcode
from contract_state.serialization import Deserializer, SerializationError, Serializer, TooLongError
from contract_state.serialization.types import Buffer

MAX_PUSHDATA1_LENGTH: int = 0xff
MAX_PUSHDATA2_LENGTH: int = 0xffff
MAX_PUSHDATA4_LENGTH: int = 0xffffffff


class InvalidPushDataError(SerializationError):
    """Raised when the opcode found where a push-data element was expected cannot push data."""
    pass


def pushdata_prefix_size(length: int) -> int:
    """ Number of bytes used by the length prefix of a payload with the given length.
    """
    if length < 0:
        raise ValueError('length cannot be negative')
    if length <= MAX_DIRECT_PUSH_LENGTH:
        return 1
    elif length <= MAX_PUSHDATA1_LENGTH:
        return 2
    elif length <= MAX_PUSHDATA2_LENGTH:
        return 3
    elif length <= MAX_PUSHDATA4_LENGTH:
        return 5
    raise TooLongError(f'payload of {length} bytes cannot be pushed')


def pushdata_size(length: int) -> int:
    """ Total number of bytes a push-data element with a payload of `length` bytes occupies.
    """
    return pushdata_prefix_size(length) + length


def encode_pushdata(serializer: Serializer, data: Buffer, *, max_length: Optional[int] = None) -> None:
    """ Write `data` as a push-data element, choosing the smallest prefix.

    This module's docstring has more details and examples.
    """
    length = len(memoryview(data))
    if max_length is not None and length > max_length:
        raise TooLongError(f'payload of {length} bytes exceeds the maximum of {max_length}')
    prefix_size = pushdata_prefix_size(length)
    if prefix_size == 1:
        serializer.write_byte(length)
    elif prefix_size == 2:
        serializer.write_struct((Opcode.OP_PUSHDATA1, length), '<BB')
    elif prefix_size == 3:
        serializer.write_struct((Opcode.OP_PUSHDATA2, length), '<BH')
    else:
        serializer.write_struct((Opcode.OP_PUSHDATA4, length), '<BI')
    if length:
        serializer.write_bytes(data)


def decode_pushdata(deserializer: Deserializer, *, max_length: Optional[int] = None) -> bytes:
    """ Read one push-data element and return its payload.

    Raises `OutOfDataError` when the length prefix overruns the buffer and `InvalidPushDataError` when the opcode is
    not a push-data opcode.
    """
    opcode = deserializer.read_byte()
    length: int
    if opcode == Opcode.OP_0:
        return b''
    elif 1 <= opcode <= MAX_DIRECT_PUSH_LENGTH:
        length = opcode
    elif opcode == Opcode.OP_PUSHDATA1:
        length, = deserializer.read_struct('<B')
    elif opcode == Opcode.OP_PUSHDATA2:
        length, = deserializer.read_struct('<H')
    elif opcode == Opcode.OP_PUSHDATA4:
        length, = deserializer.read_struct('<I')
    else:
        raise InvalidPushDataError(f'opcode 0x{opcode:02x} does not push data')
    if max_length is not None and length > max_length:
        raise TooLongError(f'payload of {length} bytes exceeds the maximum of {max_length}')
    return bytes(deserializer.read_bytes(length))
