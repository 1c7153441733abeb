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

from typing import Optional, TypeAlias

from structlog import get_logger

from contract_state.conf.get_settings import get_global_settings
from contract_state.conf.settings import ContractStateSettings
from contract_state.declarations import LibraryEntity, ParamEntity
from contract_state.exception import TypeResolutionError, UnknownTypeError
from contract_state.types import PrimitiveKind
from contract_state.typesys.descriptors import (
    ArrayType,
    LibraryType,
    Members,
    PrimitiveType,
    StructType,
    TypeDescriptor,
)
from contract_state.typesys.registry import TypeRegistry
from contract_state.typesys.type_name import TypeName, parse_type_name

logger = get_logger()

# generic parameter name -> concrete type, sorted by name so equal bindings hash equally
Bindings: TypeAlias = tuple[tuple[str, TypeName], ...]


def substitute(type_name: TypeName, bindings: dict[str, TypeName]) -> TypeName:
    """ Replace generic parameters by the types bound to them, keeping any array dimensions.

    `T[2]` with `T` bound to `int[3]` becomes `int[2][3]`: the dimensions written on the parameter are the outer ones.
    """
    bound = bindings.get(type_name.base)
    if bound is not None and not type_name.generic_args:
        return TypeName(bound.base, bound.generic_args, type_name.dims + bound.dims)
    return TypeName(
        type_name.base,
        tuple(substitute(arg, bindings) for arg in type_name.generic_args),
        type_name.dims,
    )


class TypeResolver:
    """Turn declared type names into type descriptors, against the declarations of a registry.

    Results are cached by type name and generic bindings. The cache only grows, a descriptor is computed and then
    published with `setdefault`, so two threads resolving the same name at the same time at worst both compute it and
    the first one to finish wins.
    """

    def __init__(self, registry: TypeRegistry, *, settings: Optional[ContractStateSettings] = None) -> None:
        self.log = logger.new()
        self.registry = registry
        self._settings = settings or get_global_settings()
        self._cache: dict[tuple[str, Bindings], TypeDescriptor] = {}

    def resolve(self, type_name: str) -> TypeDescriptor:
        """Resolve a type name as written in a declaration, outside of any generic context."""
        return self._resolve(type_name, (), ())

    def _resolve(self, type_name: str, bindings: Bindings, stack: tuple[tuple[str, Bindings], ...]) -> TypeDescriptor:
        key = (type_name, bindings)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        if key in stack:
            path = ' -> '.join(name for name, _ in stack[stack.index(key):])
            raise TypeResolutionError(f'circular type definition: {path} -> {type_name}')
        if len(stack) >= self._settings.MAX_TYPE_NESTING:
            raise TypeResolutionError(
                f'type {type_name!r} is nested deeper than {self._settings.MAX_TYPE_NESTING} levels'
            )

        descriptor = self._resolve_parsed(parse_type_name(type_name), bindings, stack + (key,))
        published = self._cache.setdefault(key, descriptor)
        self.log.debug('type resolved', type_name=type_name, descriptor=str(published))
        return published

    def _resolve_parsed(
        self,
        parsed: TypeName,
        bindings: Bindings,
        stack: tuple[tuple[str, Bindings], ...],
    ) -> TypeDescriptor:
        if parsed.dims:
            length = self._resolve_dim(parsed.dims[0])
            element = self._resolve(str(parsed.without_first_dim()), bindings, stack)
            return ArrayType(element, length)

        name = parsed.base
        bound = dict(bindings).get(name)
        if bound is not None:
            if parsed.generic_args:
                raise TypeResolutionError(f'generic parameter {name!r} cannot have type arguments')
            return self._resolve(str(bound), (), stack)

        kind = PrimitiveKind.from_type_name(name)
        if kind is not None:
            if parsed.generic_args:
                raise TypeResolutionError(f'type {name!r} is not generic')
            return PrimitiveType(kind)

        alias_target = self.registry.aliases.get(name)
        if alias_target is not None:
            if parsed.generic_args:
                raise TypeResolutionError(f'alias {name!r} cannot have type arguments')
            return self._resolve(alias_target, (), stack)

        entity = self.registry.get_composite(name)
        if entity is None:
            raise UnknownTypeError(name)

        if len(parsed.generic_args) != len(entity.generic_types):
            raise TypeResolutionError(
                f'type {name!r} expects {len(entity.generic_types)} type argument(s), '
                f'got {len(parsed.generic_args)}'
            )
        outer = dict(bindings)
        concrete_args = tuple(substitute(arg, outer) for arg in parsed.generic_args)
        inner_bindings: Bindings = tuple(sorted(zip(entity.generic_types, concrete_args), key=lambda item: item[0]))
        display_name = str(TypeName(name, concrete_args))

        def resolve_members(params: tuple[ParamEntity, ...]) -> Members:
            return tuple((param.name, self._resolve(param.type, inner_bindings, stack)) for param in params)

        if isinstance(entity, LibraryEntity):
            return LibraryType(display_name, resolve_members(entity.params), resolve_members(entity.properties))
        return StructType(display_name, resolve_members(entity.params))

    def _resolve_dim(self, dim: str) -> int:
        if dim.isdigit():
            length = int(dim)
        elif dim[:2].lower() == '0x':
            try:
                length = int(dim, 16)
            except ValueError:
                raise TypeResolutionError(f'invalid array size: {dim}') from None
        else:
            value = self.registry.find_static_value(dim)
            if value is None:
                raise UnknownTypeError(dim, f'unknown array size: {dim}')
            length = value
        if length <= 0:
            raise TypeResolutionError(f'array size must be positive, got {dim} = {length}')
        return length
