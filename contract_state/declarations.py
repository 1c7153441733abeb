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
Models for the declarations that a compiled contract exposes: structs, libraries, contracts, aliases and statics.

They can be read from the compiler's AST (the main contract plus its dependencies) or from a compiled artifact, both
are plain JSON-like dicts. Only the fields needed to resolve types and to describe the contract state are modeled,
everything else in those records is ignored.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from pydantic import ConfigDict, Field
from structlog import get_logger

from contract_state.utils.pydantic import BaseModel

logger = get_logger()

# name of the dependency AST holding the standard library, its contracts are builtins and not declared by users
STD_DEPENDENCY_KEY = 'std'

LIBRARY_NODE_TYPE = 'Library'
CONTRACT_NODE_TYPE = 'Contract'

# prefix given to the parameters of an explicit library/contract constructor
CTOR_PARAM_PREFIX = 'ctor.'


class _Declaration(BaseModel):
    model_config = ConfigDict(extra='ignore', frozen=True, populate_by_name=True)


class ParamEntity(_Declaration):
    name: str
    type: str


class StructEntity(_Declaration):
    name: str
    params: tuple[ParamEntity, ...] = ()
    generic_types: tuple[str, ...] = Field(default=(), alias='genericTypes')


class LibraryEntity(StructEntity):
    properties: tuple[ParamEntity, ...] = ()


# contracts are declared exactly like libraries
ContractEntity = LibraryEntity


class AliasEntity(_Declaration):
    name: str
    type: str


class StaticEntity(_Declaration):
    name: str
    type: str
    const: bool = False
    value: Any = None


class ContractArtifact(_Declaration):
    """The part of a compiled artifact that describes the contract's types and state."""
    version: Optional[int] = None
    contract: str = ''
    structs: tuple[StructEntity, ...] = ()
    library: tuple[LibraryEntity, ...] = ()
    contracts: tuple[ContractEntity, ...] = ()
    alias: tuple[AliasEntity, ...] = ()
    statics: tuple[StaticEntity, ...] = ()
    state_props: tuple[ParamEntity, ...] = Field(default=(), alias='stateProps')


def resolve_const_value(expr: Optional[Mapping[str, Any]]) -> Any:
    """ Evaluate the literal expression a static is initialized with.

    Only literals are evaluated, any other expression results in `None`.

    >>> resolve_const_value({'nodeType': 'IntLiteral', 'value': 3})
    3
    >>> resolve_const_value({'nodeType': 'UnaryExpr', 'op': 'negate', 'expr': {'nodeType': 'IntLiteral', 'value': 7}})
    -7
    >>> resolve_const_value({'nodeType': 'BytesLiteral', 'value': [1, 255]})
    b'\\x01\\xff'
    >>> resolve_const_value({'nodeType': 'Identifier', 'name': 'x'}) is None
    True
    """
    if not expr:
        return None
    match expr.get('nodeType'):
        case 'IntLiteral':
            return int(expr['value'])
        case 'BoolLiteral':
            return bool(expr['value'])
        case 'BytesLiteral':
            return bytes(expr['value'])
        case 'UnaryExpr' if expr.get('op') == 'negate':
            inner = resolve_const_value(expr.get('expr'))
            return -inner if isinstance(inner, int) and not isinstance(inner, bool) else None
        case _:
            return None


def _params(nodes: Optional[Iterable[Mapping[str, Any]]], *, prefix: str = '') -> tuple[ParamEntity, ...]:
    return tuple(ParamEntity(name=f'{prefix}{node["name"]}', type=node['type']) for node in nodes or ())


def _properties(nodes: Optional[Iterable[Mapping[str, Any]]]) -> tuple[ParamEntity, ...]:
    return tuple(ParamEntity(name=node['name'].removeprefix('this.'), type=node['type']) for node in nodes or ())


def _int_literal(value: Any) -> Optional[int]:
    return value if isinstance(value, int) and not isinstance(value, bool) else None


def _all_asts(ast_root: Mapping[str, Any], dependency_asts: Mapping[str, Any], *, skip_std: bool) -> list[Any]:
    all_asts = [ast_root]
    for key, ast in dependency_asts.items():
        if skip_std and key == STD_DEPENDENCY_KEY:
            continue
        all_asts.append(ast)
    return all_asts


def struct_declarations(
    ast_root: Mapping[str, Any],
    dependency_asts: Mapping[str, Any],
) -> list[StructEntity]:
    """All structs defined by the main contract and its dependencies."""
    return [
        StructEntity(
            name=node['name'],
            params=_params(node.get('fields')),
            generic_types=tuple(node.get('genericTypes') or ()),
        )
        for ast in _all_asts(ast_root, dependency_asts, skip_std=False)
        for node in ast.get('structs') or ()
    ]


def _library_like_declarations(
    ast_root: Mapping[str, Any],
    dependency_asts: Mapping[str, Any],
    node_type: str,
) -> list[LibraryEntity]:
    entities: list[LibraryEntity] = []
    for ast in _all_asts(ast_root, dependency_asts, skip_std=True):
        for node in ast.get('contracts') or ():
            if node.get('nodeType') != node_type:
                continue
            constructor = node.get('constructor')
            properties = _properties(node.get('properties'))
            if constructor:
                params = _params(constructor.get('params'), prefix=CTOR_PARAM_PREFIX)
            elif node.get('properties'):
                # implicit constructor, takes every property in declaration order
                params = properties
            else:
                logger.debug('declaration without constructor nor properties', name=node.get('name'))
                continue
            entities.append(LibraryEntity(
                name=node['name'],
                params=params,
                properties=properties,
                generic_types=tuple(node.get('genericTypes') or ()),
            ))
    return entities


def library_declarations(ast_root: Mapping[str, Any], dependency_asts: Mapping[str, Any]) -> list[LibraryEntity]:
    """All libraries defined by the main contract and its dependencies, except the standard library."""
    return _library_like_declarations(ast_root, dependency_asts, LIBRARY_NODE_TYPE)


def contract_declarations(ast_root: Mapping[str, Any], dependency_asts: Mapping[str, Any]) -> list[ContractEntity]:
    """All contracts defined by the main contract and its dependencies, except the standard library."""
    return _library_like_declarations(ast_root, dependency_asts, CONTRACT_NODE_TYPE)


def alias_declarations(ast_root: Mapping[str, Any], dependency_asts: Mapping[str, Any]) -> list[AliasEntity]:
    """All type aliases defined by the main contract and its dependencies."""
    return [
        AliasEntity(name=node['alias'], type=node['type'])
        for ast in _all_asts(ast_root, dependency_asts, skip_std=False)
        for node in ast.get('alias') or ()
    ]


def static_declarations(ast_root: Mapping[str, Any], dependency_asts: Mapping[str, Any]) -> list[StaticEntity]:
    """All statics of every contract, named `Contract.name`, with their value when it is an integer literal."""
    return [
        StaticEntity(
            name=f'{contract["name"]}.{node["name"]}',
            type=node['type'],
            const=bool(node.get('const')),
            value=_int_literal(resolve_const_value(node.get('expr'))),
        )
        for ast in _all_asts(ast_root, dependency_asts, skip_std=False)
        for contract in ast.get('contracts') or ()
        for node in contract.get('statics') or ()
    ]


def state_property_declarations(ast_root: Mapping[str, Any]) -> list[ParamEntity]:
    """State properties of the main contract, which is the last contract of the root AST."""
    contracts = ast_root.get('contracts') or ()
    if not contracts:
        return []
    main_contract = contracts[-1]
    return [
        ParamEntity(name=node['name'].removeprefix('this.'), type=node['type'])
        for node in main_contract.get('properties') or ()
        if node.get('state')
    ]
