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

from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from structlog import get_logger

from contract_state.declarations import (
    AliasEntity,
    ContractArtifact,
    ContractEntity,
    LibraryEntity,
    ParamEntity,
    StaticEntity,
    StructEntity,
    alias_declarations,
    contract_declarations,
    library_declarations,
    state_property_declarations,
    static_declarations,
    struct_declarations,
)
from contract_state.exception import TypeResolutionError
from contract_state.types import BUILTIN_TYPE_ALIASES

logger = get_logger()


def _index(kind: str, entities: Iterable[Any]) -> Mapping[str, Any]:
    indexed: dict[str, Any] = {}
    for entity in entities:
        if entity.name in indexed:
            # the main contract comes first, a dependency cannot shadow its declarations
            logger.debug('duplicate declaration ignored', kind=kind, name=entity.name)
            continue
        indexed[entity.name] = entity
    return MappingProxyType(indexed)


class TypeRegistry:
    """Every declaration a type name can refer to, indexed by name.

    A registry is immutable once built, it can be shared by any number of resolvers.
    """

    def __init__(
        self,
        *,
        structs: Iterable[StructEntity] = (),
        libraries: Iterable[LibraryEntity] = (),
        contracts: Iterable[ContractEntity] = (),
        aliases: Iterable[AliasEntity] = (),
        statics: Iterable[StaticEntity] = (),
        state_props: Iterable[ParamEntity] = (),
    ) -> None:
        self.structs: Mapping[str, StructEntity] = _index('struct', structs)
        self.libraries: Mapping[str, LibraryEntity] = _index('library', libraries)
        self.contracts: Mapping[str, ContractEntity] = _index('contract', contracts)
        self.aliases: Mapping[str, str] = MappingProxyType({
            **BUILTIN_TYPE_ALIASES,
            **{alias.name: alias.type for alias in _index('alias', aliases).values()},
        })
        self.statics: Mapping[str, StaticEntity] = _index('static', statics)
        self.state_props: tuple[ParamEntity, ...] = tuple(state_props)

    @classmethod
    def from_ast(
        cls,
        ast_root: Mapping[str, Any],
        dependency_asts: Optional[Mapping[str, Any]] = None,
    ) -> TypeRegistry:
        """Build a registry from the compiler's AST of the main contract and the ASTs of its dependencies."""
        dependency_asts = dependency_asts or {}
        return cls(
            structs=struct_declarations(ast_root, dependency_asts),
            libraries=library_declarations(ast_root, dependency_asts),
            contracts=contract_declarations(ast_root, dependency_asts),
            aliases=alias_declarations(ast_root, dependency_asts),
            statics=static_declarations(ast_root, dependency_asts),
            state_props=state_property_declarations(ast_root),
        )

    @classmethod
    def from_artifact(cls, artifact: ContractArtifact | Mapping[str, Any]) -> TypeRegistry:
        """Build a registry from a compiled artifact, either already validated or as the parsed JSON."""
        if not isinstance(artifact, ContractArtifact):
            artifact = ContractArtifact.model_validate(artifact)
        return cls(
            structs=artifact.structs,
            libraries=artifact.library,
            contracts=artifact.contracts,
            aliases=artifact.alias,
            statics=artifact.statics,
            state_props=artifact.state_props,
        )

    def get_composite(self, name: str) -> Optional[StructEntity]:
        """Find a struct, library or contract, in this order."""
        return self.structs.get(name) or self.libraries.get(name) or self.contracts.get(name)

    def find_static_value(self, name: str) -> Optional[int]:
        """ Integer value of a static, by its full name (`Contract.N`) or by a bare name if only one static has it.

        Returns None if no static matches. A bare name that matches statics of more than one contract is ambiguous.
        """
        static = self.statics.get(name)
        if static is None and '.' not in name:
            candidates = [s for s in self.statics.values() if s.name.rsplit('.', 1)[-1] == name]
            if len(candidates) > 1:
                raise TypeResolutionError(f'ambiguous static {name!r}: ' + ', '.join(s.name for s in candidates))
            static = candidates[0] if candidates else None
        if static is None:
            return None
        value = static.value
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeResolutionError(f'static {static.name!r} is not an integer literal')
        return value
