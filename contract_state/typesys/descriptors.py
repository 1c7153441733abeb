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

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from contract_state.types import PrimitiveKind

Members: TypeAlias = tuple[tuple[str, 'TypeDescriptor'], ...]


@dataclass(slots=True, frozen=True)
class PrimitiveType:
    """A type that is a single leaf."""
    kind: PrimitiveKind

    def __str__(self) -> str:
        return str(self.kind)


@dataclass(slots=True, frozen=True)
class StructType:
    """A struct with its fields in declaration order, `name` includes the generic arguments if any."""
    name: str
    fields: Members

    def __str__(self) -> str:
        return self.name


@dataclass(slots=True, frozen=True)
class LibraryType:
    """A library or contract used as a value.

    `params` are the parameters of its constructor and `properties` the properties it stores. Which of them make up
    its value depends on whether it is flattened as state or as constructor arguments.
    """
    name: str
    params: Members
    properties: Members

    def members(self, *, state: bool) -> Members:
        return self.properties if state else self.params

    def __str__(self) -> str:
        return self.name


@dataclass(slots=True, frozen=True)
class ArrayType:
    """A fixed-size array, `T[a][b]` is an array of `a` elements of type `T[b]`."""
    element: TypeDescriptor
    length: int

    def __str__(self) -> str:
        element = self.element
        dims = [self.length]
        while isinstance(element, ArrayType):
            dims.append(element.length)
            element = element.element
        return str(element) + ''.join(f'[{dim}]' for dim in dims)


TypeDescriptor: TypeAlias = PrimitiveType | StructType | LibraryType | ArrayType
