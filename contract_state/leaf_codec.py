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
Wire format of a single leaf of a state blob.

- `bool`: one raw byte, `01` or `00`, it is not a push-data element
- `int`, `PrivKey` and `SigHashType`: the minimal sign-magnitude little-endian bytes of the number, where zero is the
  single byte `00`, pushed as a push-data element
- every other kind: the raw bytes pushed as a push-data element, an empty value is the single byte `00`

>>> encode_leaf(PrimitiveKind.INT, 5).hex()
'0105'
>>> encode_leaf(PrimitiveKind.INT, 0).hex()
'0100'
>>> encode_leaf(PrimitiveKind.INT, -1).hex()
'0181'
>>> encode_leaf(PrimitiveKind.INT, 128).hex()
'028000'
>>> encode_leaf(PrimitiveKind.BOOL, True).hex()
'01'
>>> encode_leaf(PrimitiveKind.BYTES, b'').hex()
'00'
>>> encode_leaf(PrimitiveKind.SHA1, bytes(20)).hex()
'140000000000000000000000000000000000000000'

>>> decode_leaf(PrimitiveKind.INT, '028000')
128
>>> decode_leaf(PrimitiveKind.INT, '00')
0
>>> decode_leaf(PrimitiveKind.BYTES, '00')
b''
>>> decode_leaf('PubKey', '02abcd')
b'\xab\xcd'
>>> decode_leaf(PrimitiveKind.BOOL, '02')
Traceback (most recent call last):
...
contract_state.exception.MalformedLeafError: invalid boolean byte 0x02 (position=0)
"""

import re
from typing import Any, Optional

from typing_extensions import assert_never

from contract_state.exception import MalformedLeafError
from contract_state.scripts.opcode import Opcode
from contract_state.scripts.pushdata import decode_pushdata, encode_pushdata
from contract_state.serialization import Deserializer, SerializationError, Serializer
from contract_state.serialization.encoding.bool import read_bool, write_bool
from contract_state.serialization.encoding.sign_magnitude import from_sign_magnitude, to_sign_magnitude
from contract_state.serialization.types import Buffer
from contract_state.types import (
    LeafValue,
    OpCodeType,
    PrimitiveKind,
    PubKey,
    Ripemd160,
    Sha1,
    Sha256,
    Sig,
    SigHashPreimage,
)

MIN_SIGHASH_TYPE: int = 0
MAX_SIGHASH_TYPE: int = 0xff

_HEX_DIGITS_RE = re.compile(r'[0-9a-fA-F]*')

# Value of every kind in a state template. The placeholders of byte kinds and of number kinds have the same encoding,
# a push of one zero byte.
_PLACEHOLDER_BYTES = b'\x00'


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_leaf_value(kind: PrimitiveKind, value: Any) -> None:
    """ Check that `value` can be the value of a leaf of the given kind.

    Raises `TypeError` for a value of the wrong Python type and `ValueError` for an out of range `SigHashType`.
    """
    match kind:
        case PrimitiveKind.BOOL:
            if not isinstance(value, bool):
                raise TypeError(f'{kind} value must be a bool, got {type(value).__name__}')
        case PrimitiveKind.INT | PrimitiveKind.PRIVKEY:
            if not _is_int(value):
                raise TypeError(f'{kind} value must be an int, got {type(value).__name__}')
        case PrimitiveKind.SIGHASHTYPE:
            if not _is_int(value):
                raise TypeError(f'{kind} value must be an int, got {type(value).__name__}')
            if not MIN_SIGHASH_TYPE <= value <= MAX_SIGHASH_TYPE:
                raise ValueError(
                    f'{kind} value must be between {MIN_SIGHASH_TYPE} and {MAX_SIGHASH_TYPE}, got {value}'
                )
        case (
            PrimitiveKind.BYTES
            | PrimitiveKind.PUBKEY
            | PrimitiveKind.SIG
            | PrimitiveKind.RIPEMD160
            | PrimitiveKind.SHA1
            | PrimitiveKind.SHA256
            | PrimitiveKind.SIGHASHPREIMAGE
            | PrimitiveKind.OPCODETYPE
        ):
            if not isinstance(value, bytes):
                raise TypeError(f'{kind} value must be bytes, got {type(value).__name__}')
        case _:
            assert_never(kind)


def serialize_leaf(
    serializer: Serializer,
    kind: PrimitiveKind,
    value: LeafValue,
    *,
    max_size: Optional[int] = None,
) -> None:
    """ Write one leaf, the module's docstring describes the format of each kind.
    """
    check_leaf_value(kind, value)
    match kind:
        case PrimitiveKind.BOOL:
            assert isinstance(value, bool)
            write_bool(serializer, value)
        case PrimitiveKind.INT | PrimitiveKind.PRIVKEY | PrimitiveKind.SIGHASHTYPE:
            assert isinstance(value, int)
            encode_pushdata(serializer, to_sign_magnitude(value), max_length=max_size)
        case (
            PrimitiveKind.BYTES
            | PrimitiveKind.PUBKEY
            | PrimitiveKind.SIG
            | PrimitiveKind.RIPEMD160
            | PrimitiveKind.SHA1
            | PrimitiveKind.SHA256
            | PrimitiveKind.SIGHASHPREIMAGE
            | PrimitiveKind.OPCODETYPE
        ):
            assert isinstance(value, bytes)
            if not value:
                serializer.write_byte(Opcode.OP_0)
            else:
                encode_pushdata(serializer, value, max_length=max_size)
        case _:
            assert_never(kind)


def _read_leaf(deserializer: Deserializer, kind: PrimitiveKind, max_size: Optional[int]) -> LeafValue:
    match kind:
        case PrimitiveKind.BOOL:
            return read_bool(deserializer)
        case PrimitiveKind.INT | PrimitiveKind.PRIVKEY:
            return from_sign_magnitude(decode_pushdata(deserializer, max_length=max_size))
        case PrimitiveKind.SIGHASHTYPE:
            sighash_type = from_sign_magnitude(decode_pushdata(deserializer, max_length=max_size))
            if not MIN_SIGHASH_TYPE <= sighash_type <= MAX_SIGHASH_TYPE:
                raise ValueError(f'invalid {kind} {sighash_type}')
            return sighash_type
        case PrimitiveKind.BYTES:
            return decode_pushdata(deserializer, max_length=max_size)
        case PrimitiveKind.PUBKEY:
            return PubKey(decode_pushdata(deserializer, max_length=max_size))
        case PrimitiveKind.SIG:
            return Sig(decode_pushdata(deserializer, max_length=max_size))
        case PrimitiveKind.RIPEMD160:
            return Ripemd160(decode_pushdata(deserializer, max_length=max_size))
        case PrimitiveKind.SHA1:
            return Sha1(decode_pushdata(deserializer, max_length=max_size))
        case PrimitiveKind.SHA256:
            return Sha256(decode_pushdata(deserializer, max_length=max_size))
        case PrimitiveKind.SIGHASHPREIMAGE:
            return SigHashPreimage(decode_pushdata(deserializer, max_length=max_size))
        case PrimitiveKind.OPCODETYPE:
            return OpCodeType(decode_pushdata(deserializer, max_length=max_size))
        case _:
            assert_never(kind)


def deserialize_leaf(
    deserializer: Deserializer,
    kind: PrimitiveKind,
    *,
    name_path: Optional[str] = None,
    max_size: Optional[int] = None,
) -> LeafValue:
    """ Read one leaf of the given kind.

    Any problem with the bytes is raised as `MalformedLeafError`, with the leaf name and the position where the leaf
    starts.
    """
    position = deserializer.cur_pos()
    try:
        return _read_leaf(deserializer, kind, max_size)
    except (SerializationError, ValueError) as e:
        raise MalformedLeafError(str(e), name_path=name_path, position=position) from e


def parse_hex(data: str, *, name_path: Optional[str] = None) -> bytes:
    """Convert a hex string to bytes, raising `MalformedLeafError` when it is not valid hex.

    Only hex digits are accepted, whitespace included is an error.
    """
    if not _HEX_DIGITS_RE.fullmatch(data):
        raise MalformedLeafError(f'invalid hex string: {data!r}', name_path=name_path)
    if len(data) % 2:
        raise MalformedLeafError(f'odd-length hex string ({len(data)} digits)', name_path=name_path)
    return bytes.fromhex(data)


def _as_kind(kind: PrimitiveKind | str, name_path: Optional[str]) -> PrimitiveKind:
    if isinstance(kind, PrimitiveKind):
        return kind
    found = PrimitiveKind.from_type_name(kind)
    if found is None:
        raise MalformedLeafError(f'unsupported leaf kind: {kind!r}', name_path=name_path)
    return found


def encode_leaf(kind: PrimitiveKind | str, value: LeafValue, *, max_size: Optional[int] = None) -> bytes:
    """Encode a standalone leaf."""
    serializer = Serializer.build_bytes_serializer()
    serialize_leaf(serializer, _as_kind(kind, None), value, max_size=max_size)
    return bytes(serializer.finalize())


def decode_leaf(
    kind: PrimitiveKind | str,
    data: Buffer | str,
    *,
    name_path: Optional[str] = None,
    max_size: Optional[int] = None,
) -> LeafValue:
    """Decode a standalone leaf from bytes or from a hex string, the whole input must be used."""
    kind = _as_kind(kind, name_path)
    raw = parse_hex(data, name_path=name_path) if isinstance(data, str) else data
    deserializer = Deserializer.build_bytes_deserializer(raw)
    value = deserialize_leaf(deserializer, kind, name_path=name_path, max_size=max_size)
    if not deserializer.is_empty():
        raise MalformedLeafError(f'{deserializer.remaining()} trailing byte(s) after the leaf', name_path=name_path,
                                 position=deserializer.cur_pos())
    return value


def placeholder_leaf_value(kind: PrimitiveKind) -> LeafValue:
    """Value of a leaf of the given kind in a state template."""
    match kind:
        case PrimitiveKind.BOOL:
            return True
        case PrimitiveKind.INT | PrimitiveKind.PRIVKEY | PrimitiveKind.SIGHASHTYPE:
            return 0
        case (
            PrimitiveKind.BYTES
            | PrimitiveKind.PUBKEY
            | PrimitiveKind.SIG
            | PrimitiveKind.RIPEMD160
            | PrimitiveKind.SHA1
            | PrimitiveKind.SHA256
            | PrimitiveKind.SIGHASHPREIMAGE
            | PrimitiveKind.OPCODETYPE
        ):
            return _PLACEHOLDER_BYTES
        case _:
            assert_never(kind)


def value_to_json(kind: PrimitiveKind, value: Any) -> Any:
    """Convert a leaf value to a JSON compatible value, bytes become hex strings."""
    check_leaf_value(kind, value)
    if isinstance(value, bytes):
        return value.hex()
    return value


def json_to_value(kind: PrimitiveKind, json_value: Any) -> LeafValue:
    """ Inverse of `value_to_json`.

    Numbers can also be given as decimal or `0x` prefixed strings, for values that JSON tools would lose precision on.
    """
    value: Any = json_value
    match kind:
        case PrimitiveKind.BOOL:
            pass
        case PrimitiveKind.INT | PrimitiveKind.PRIVKEY | PrimitiveKind.SIGHASHTYPE:
            if isinstance(json_value, str):
                value = int(json_value, 0)
        case (
            PrimitiveKind.BYTES
            | PrimitiveKind.PUBKEY
            | PrimitiveKind.SIG
            | PrimitiveKind.RIPEMD160
            | PrimitiveKind.SHA1
            | PrimitiveKind.SHA256
            | PrimitiveKind.SIGHASHPREIMAGE
            | PrimitiveKind.OPCODETYPE
        ):
            if not isinstance(json_value, str):
                raise TypeError(f'{kind} value must be a hex string, got {type(json_value).__name__}')
            value = bytes.fromhex(json_value)
        case _:
            assert_never(kind)
    check_leaf_value(kind, value)
    return value
