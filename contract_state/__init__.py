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
Encoding and decoding of the state of stateful smart contracts, as a blob appended to their locking script.
"""

from contract_state.contract import ContractState
from contract_state.declarations import ContractArtifact, ParamEntity
from contract_state.exception import (
    ContractStateError,
    EmptyStateError,
    MalformedLeafError,
    StateDecodeError,
    TruncatedStateError,
    TypeResolutionError,
    UnknownTypeError,
    UnsupportedVersionError,
)
from contract_state.flattening import Argument, FlattenedLeaf, flatten, flatten_all, unflatten
from contract_state.leaf_codec import decode_leaf, encode_leaf
from contract_state.state import StateBlob, build_state, build_template, parse_state
from contract_state.types import PrimitiveKind
from contract_state.typesys import TypeRegistry, TypeResolver
from contract_state.version import __version__

__all__ = [
    'ContractState',
    'ContractArtifact',
    'ParamEntity',
    'ContractStateError',
    'EmptyStateError',
    'MalformedLeafError',
    'StateDecodeError',
    'TruncatedStateError',
    'TypeResolutionError',
    'UnknownTypeError',
    'UnsupportedVersionError',
    'Argument',
    'FlattenedLeaf',
    'flatten',
    'flatten_all',
    'unflatten',
    'decode_leaf',
    'encode_leaf',
    'StateBlob',
    'build_state',
    'build_template',
    'parse_state',
    'PrimitiveKind',
    'TypeRegistry',
    'TypeResolver',
    '__version__',
]
