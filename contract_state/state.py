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
Building and parsing of state blobs.

A state blob is appended to a contract's locking script, it has the layout:

    [body][body length: u32 little-endian][version: u8]

The first byte of the body tells whether this is the first state of the contract (genesis), the following bytes are
the state leaves, one after the other in flattening order. The trailer is at the end of the script so the state can be
found without parsing the code before it.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from structlog import get_logger

from contract_state.conf.get_settings import get_global_settings
from contract_state.conf.settings import ContractStateSettings
from contract_state.consts import (
    CURRENT_STATE_VERSION,
    MAX_STATE_BODY_LENGTH,
    STATE_TRAILER_FORMAT,
    STATE_TRAILER_SIZE,
    SUPPORTED_STATE_VERSIONS,
)
from contract_state.declarations import ParamEntity
from contract_state.exception import EmptyStateError, MalformedLeafError, TruncatedStateError, UnsupportedVersionError
from contract_state.flattening import Argument, FlattenedLeaf, flatten_all, flatten_params, unflatten
from contract_state.leaf_codec import deserialize_leaf, encode_leaf, parse_hex, placeholder_leaf_value, serialize_leaf
from contract_state.serialization import Deserializer, SerializationError, Serializer
from contract_state.serialization.encoding.bool import read_bool, write_bool
from contract_state.serialization.types import Buffer
from contract_state.types import LeafValue
from contract_state.typesys import TypeResolver

logger = get_logger()

# name used for the genesis flag in errors, it is not a declared property
GENESIS_LEAF_NAME = 'isGenesis'


@dataclass(slots=True, frozen=True)
class StateBlob:
    body: bytes
    version: int = CURRENT_STATE_VERSION

    def __post_init__(self) -> None:
        if len(self.body) > MAX_STATE_BODY_LENGTH:
            raise ValueError(f'state body too long: {len(self.body)} bytes')
        if not 0 <= self.version <= 0xff:
            raise ValueError(f'state version must fit in one byte, got {self.version}')

    @property
    def body_length(self) -> int:
        return len(self.body)

    @property
    def is_genesis(self) -> bool:
        """The genesis flag at the start of the body."""
        if not self.body:
            raise MalformedLeafError('empty state body', name_path=GENESIS_LEAF_NAME, position=0)
        return _read_genesis(Deserializer.build_bytes_deserializer(self.body))

    def trailer(self) -> bytes:
        return struct.pack(STATE_TRAILER_FORMAT, self.body_length, self.version)

    def to_bytes(self) -> bytes:
        return self.body + self.trailer()

    def hex(self) -> str:
        return self.to_bytes().hex()

    @classmethod
    def from_script(cls, script: Buffer | str) -> StateBlob:
        """ Extract the state blob at the end of a locking script, given as bytes or as a hex string.

        Raises `TruncatedStateError` if the script is too short for its own trailer and `UnsupportedVersionError` for
        an unknown state version.
        """
        data = memoryview(parse_hex(script) if isinstance(script, str) else script)
        if len(data) < STATE_TRAILER_SIZE:
            raise TruncatedStateError(f'script has {len(data)} bytes, a state trailer needs {STATE_TRAILER_SIZE}')

        deserializer = Deserializer.build_bytes_deserializer(data[-STATE_TRAILER_SIZE:])
        body_length, version = deserializer.read_struct(STATE_TRAILER_FORMAT)
        deserializer.finalize()

        if version not in SUPPORTED_STATE_VERSIONS:
            raise UnsupportedVersionError(version)
        if len(data) < body_length + STATE_TRAILER_SIZE:
            raise TruncatedStateError(
                f'state body of {body_length} bytes does not fit in a script of {len(data)} bytes'
            )

        start = len(data) - STATE_TRAILER_SIZE - body_length
        return cls(body=bytes(data[start:start + body_length]), version=version)


def _read_genesis(deserializer: Deserializer) -> bool:
    position = deserializer.cur_pos()
    try:
        return read_bool(deserializer)
    except (SerializationError, ValueError) as e:
        raise MalformedLeafError(str(e), name_path=GENESIS_LEAF_NAME, position=position) from e


def _settings(settings: Optional[ContractStateSettings]) -> ContractStateSettings:
    return settings or get_global_settings()


def build_state(
    leaves: Sequence[FlattenedLeaf],
    is_genesis: bool,
    *,
    settings: Optional[ContractStateSettings] = None,
) -> StateBlob:
    """ Encode flattened state leaves into a state blob.

    Raises `EmptyStateError` when there are no leaves, a state blob always has at least one.
    """
    if not isinstance(is_genesis, bool):
        raise TypeError(f'is_genesis must be a bool, got {type(is_genesis).__name__}')
    if not leaves:
        raise EmptyStateError('cannot build a state without leaves')
    max_size = _settings(settings).MAX_LEAF_SIZE

    serializer = Serializer.build_bytes_serializer()
    write_bool(serializer, is_genesis)
    for leaf in leaves:
        if leaf.value is None:
            raise ValueError(f'leaf {leaf.name} has no value')
        serialize_leaf(serializer, leaf.kind, leaf.value, max_size=max_size)
    blob = StateBlob(bytes(serializer.finalize()))

    logger.debug('state built', leaves=len(leaves), body_length=blob.body_length, is_genesis=is_genesis)
    return blob


def build_template(
    declared: Iterable[ParamEntity],
    resolver: TypeResolver,
    *,
    settings: Optional[ContractStateSettings] = None,
) -> dict[str, bytes]:
    """ Encoded placeholder of every state leaf, by leaf name.

    Placeholders are `true` for booleans, zero for numbers and a single zero byte for byte strings.
    """
    leaves = flatten_params(declared, resolver, state=True, settings=settings)
    return {leaf.name: encode_leaf(leaf.kind, placeholder_leaf_value(leaf.kind)) for leaf in leaves}


def parse_state_leaves(
    blob: StateBlob,
    arguments: Sequence[Argument],
    *,
    settings: Optional[ContractStateSettings] = None,
) -> tuple[bool, dict[str, LeafValue]]:
    """ Decode the body of a state blob into the genesis flag and the value of each leaf of `arguments`, by leaf name.

    Only the names and types of the arguments are used. Every byte of the body must be used by exactly one leaf.
    """
    settings = _settings(settings)
    template = flatten_all(arguments, state=True, ignore_value=True, settings=settings)

    deserializer = Deserializer.build_bytes_deserializer(blob.body)
    is_genesis = _read_genesis(deserializer)
    values: dict[str, LeafValue] = {}
    for leaf in template:
        values[leaf.name] = deserialize_leaf(deserializer, leaf.kind, name_path=leaf.name,
                                             max_size=settings.MAX_LEAF_SIZE)
    if not deserializer.is_empty():
        raise MalformedLeafError(f'{deserializer.remaining()} byte(s) left in the state body after the last leaf',
                                 position=deserializer.cur_pos())
    return is_genesis, values


def parse_state(
    script: Buffer | str,
    declared: Iterable[ParamEntity],
    resolver: TypeResolver,
    *,
    settings: Optional[ContractStateSettings] = None,
) -> tuple[bool, list[Argument]]:
    """ Parse the state at the end of a locking script back into the declared state properties.

    Returns the genesis flag and one argument per declared property, in declaration order, with its nested value.
    """
    blob = StateBlob.from_script(script)
    arguments = [Argument.from_param(param, resolver) for param in declared]
    is_genesis, values = parse_state_leaves(blob, arguments, settings=settings)
    logger.debug('state parsed', leaves=len(values), body_length=blob.body_length, is_genesis=is_genesis)
    return is_genesis, unflatten(arguments, values, state=True)
