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

from typing import Optional


class ContractStateError(Exception):
    """Base class for exceptions in contract-state."""
    pass


class TypeResolutionError(ContractStateError):
    """Raised when a declared type cannot be turned into a type descriptor."""
    pass


class UnknownTypeError(TypeResolutionError):
    """Raised when a type name matches no primitive, alias, struct, library or contract."""

    def __init__(self, type_name: str, message: Optional[str] = None) -> None:
        self.type_name = type_name
        super().__init__(message or f'unknown type: {type_name}')


class EmptyStateError(ContractStateError):
    """Raised when a stateful contract has no flattenable state property."""
    pass


class StateDecodeError(ContractStateError):
    """Base class for errors found while decoding a state blob."""
    pass


class MalformedLeafError(StateDecodeError):
    """Raised when the bytes of a single leaf violate its wire rule.

    The whole parse is aborted, every following leaf position depends on having consumed this one correctly.
    """

    def __init__(self, message: str, *, name_path: Optional[str] = None, position: Optional[int] = None) -> None:
        self.name_path = name_path
        self.position = position
        details = []
        if name_path is not None:
            details.append(f'leaf={name_path}')
        if position is not None:
            details.append(f'position={position}')
        if details:
            message = f'{message} ({", ".join(details)})'
        super().__init__(message)


class TruncatedStateError(StateDecodeError):
    """Raised when a script is shorter than its state trailer says it should be."""
    pass


class UnsupportedVersionError(StateDecodeError):
    """Raised when the trailer carries a state version that is not understood."""

    def __init__(self, version: int) -> None:
        self.version = version
        super().__init__(f'unsupported state version: {version}')
