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
Flattening turns a named, possibly nested, argument into the ordered list of its primitive leaves.

Leaves are named after their path from the argument: `parent.field` for struct, library and contract members and
`parent[index]` for array elements. The order is the declaration order of fields and the index order of elements, it
is the order in which leaves are laid out in a state blob, so it must never change.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence

from structlog import get_logger
from typing_extensions import assert_never

from contract_state.conf.get_settings import get_global_settings
from contract_state.conf.settings import ContractStateSettings
from contract_state.declarations import ParamEntity
from contract_state.exception import EmptyStateError
from contract_state.types import LeafValue, PrimitiveKind
from contract_state.typesys import ArrayType, LibraryType, PrimitiveType, StructType, TypeDescriptor, TypeResolver

logger = get_logger()


@dataclass(slots=True, frozen=True)
class Argument:
    """A named value of a resolved type, the value has the nested shape of the type."""
    name: str
    type: TypeDescriptor
    value: Any = None

    @classmethod
    def from_param(cls, param: ParamEntity, resolver: TypeResolver, value: Any = None) -> Argument:
        return cls(param.name, resolver.resolve(param.type), value)


@dataclass(slots=True, frozen=True)
class FlattenedLeaf:
    name: str
    kind: PrimitiveKind
    value: Optional[LeafValue] = None


def default_leaf_value(kind: PrimitiveKind) -> LeafValue:
    """Value given to leaves when flattening without values."""
    match kind:
        case PrimitiveKind.BOOL:
            return False
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
            return b''
        case _:
            assert_never(kind)


class _Flattener:
    def __init__(self, *, state: bool, ignore_value: bool, max_leaves: int) -> None:
        self.state = state
        self.ignore_value = ignore_value
        self.max_leaves = max_leaves
        self.leaves: list[FlattenedLeaf] = []

    def visit(self, name: str, type_: TypeDescriptor, value: Any) -> None:
        match type_:
            case PrimitiveType(kind=kind):
                if len(self.leaves) >= self.max_leaves:
                    raise ValueError(f'too many leaves, the maximum is {self.max_leaves}')
                if self.ignore_value:
                    value = default_leaf_value(kind)
                elif value is None:
                    raise ValueError(f'missing value for {name}')
                self.leaves.append(FlattenedLeaf(name, kind, value))
            case StructType(fields=fields):
                self._visit_members(name, type_, fields, value)
            case LibraryType():
                self._visit_members(name, type_, type_.members(state=self.state), value)
            case ArrayType(element=element, length=length):
                if not self.ignore_value:
                    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
                        raise TypeError(f'{name} must be a list with {length} elements, got {type(value).__name__}')
                    if len(value) != length:
                        raise ValueError(f'{name} must have {length} elements, got {len(value)}')
                for index in range(length):
                    self.visit(f'{name}[{index}]', element, None if self.ignore_value else value[index])
            case _:
                assert_never(type_)

    def _visit_members(
        self,
        name: str,
        type_: StructType | LibraryType,
        members: Iterable[tuple[str, TypeDescriptor]],
        value: Any,
    ) -> None:
        if not self.ignore_value and not isinstance(value, Mapping):
            raise TypeError(f'{name} must be a mapping with the fields of {type_}, got {type(value).__name__}')
        members = tuple(members)
        if not self.ignore_value:
            known = {member_name for member_name, _ in members}
            unknown = sorted(f'{name}.{key}' for key in value if key not in known)
            if unknown:
                raise ValueError(f'unknown fields of {type_}: {", ".join(unknown)}')
        for member_name, member_type in members:
            member_value = None
            if not self.ignore_value:
                if member_name not in value:
                    raise ValueError(f'missing field {name}.{member_name} of {type_}')
                member_value = value[member_name]
            self.visit(f'{name}.{member_name}', member_type, member_value)


def _max_leaves(settings: Optional[ContractStateSettings]) -> int:
    return (settings or get_global_settings()).MAX_STATE_LEAVES


def flatten(
    argument: Argument,
    *,
    state: bool,
    ignore_value: bool = False,
    settings: Optional[ContractStateSettings] = None,
) -> list[FlattenedLeaf]:
    """ Flatten a single argument into its leaves, in layout order.

    `state` selects what a library or contract value is made of: its stored properties when True and its constructor
    parameters otherwise, structs and arrays are not affected by it. With `ignore_value` the argument's value is not
    read at all, every leaf gets the default value of its kind.
    """
    flattener = _Flattener(state=state, ignore_value=ignore_value, max_leaves=_max_leaves(settings))
    flattener.visit(argument.name, argument.type, argument.value)
    return flattener.leaves


def flatten_all(
    arguments: Iterable[Argument],
    *,
    state: bool,
    ignore_value: bool = False,
    settings: Optional[ContractStateSettings] = None,
) -> list[FlattenedLeaf]:
    """ Flatten every argument, in order, into a single list of leaves.

    When flattening state there must be at least one leaf, otherwise `EmptyStateError` is raised.
    """
    flattener = _Flattener(state=state, ignore_value=ignore_value, max_leaves=_max_leaves(settings))
    for argument in arguments:
        flattener.visit(argument.name, argument.type, argument.value)
    if state and not flattener.leaves:
        raise EmptyStateError('the contract has no state properties')
    logger.debug('arguments flattened', leaves=len(flattener.leaves), state=state, ignore_value=ignore_value)
    return flattener.leaves


def flatten_params(
    params: Iterable[ParamEntity],
    resolver: TypeResolver,
    values: Optional[Mapping[str, Any]] = None,
    *,
    state: bool,
    settings: Optional[ContractStateSettings] = None,
) -> list[FlattenedLeaf]:
    """ Resolve and flatten declared parameters, taking their values from `values` by name.

    Without `values` the leaves get default values.
    """
    arguments = [Argument.from_param(param, resolver, None if values is None else values.get(param.name))
                 for param in params]
    if values is not None:
        missing = [argument.name for argument in arguments if argument.name not in values]
        if missing:
            raise ValueError('missing value for ' + ', '.join(missing))
    return flatten_all(arguments, state=state, ignore_value=values is None, settings=settings)


def _rebuild(name: str, type_: TypeDescriptor, values: Mapping[str, Any], state: bool) -> Any:
    match type_:
        case PrimitiveType():
            try:
                return values[name]
            except KeyError:
                raise ValueError(f'no value for leaf {name}') from None
        case StructType():
            return {
                field: _rebuild(f'{name}.{field}', field_type, values, state)
                for field, field_type in type_.fields
            }
        case LibraryType():
            return {
                member: _rebuild(f'{name}.{member}', member_type, values, state)
                for member, member_type in type_.members(state=state)
            }
        case ArrayType(element=element, length=length):
            return [_rebuild(f'{name}[{index}]', element, values, state) for index in range(length)]
        case _:
            assert_never(type_)


def unflatten(
    arguments: Iterable[Argument],
    values: Mapping[str, Any],
    *,
    state: bool,
) -> list[Argument]:
    """ Inverse of `flatten_all`: give each argument the nested value built from its leaves' values.

    `values` maps each leaf name to its value. The values of the given arguments are not used, only their names and
    types.
    """
    return [Argument(argument.name, argument.type, _rebuild(argument.name, argument.type, values, state))
            for argument in arguments]
