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

from typing import Any, Mapping, Optional

from structlog import get_logger

from contract_state.conf.get_settings import get_global_settings
from contract_state.conf.settings import ContractStateSettings
from contract_state.declarations import ContractArtifact, ParamEntity
from contract_state.flattening import Argument, FlattenedLeaf, flatten_all, flatten_params, unflatten
from contract_state.leaf_codec import decode_leaf, json_to_value, value_to_json
from contract_state.state import StateBlob, build_state, build_template, parse_state_leaves
from contract_state.types import LeafValue
from contract_state.typesys import TypeRegistry, TypeResolver

logger = get_logger()


class ContractState:
    """The state of one contract: its declared state properties and the types they refer to.

    Values of state properties are given and returned as a dict by property name. Struct, library and contract values
    are dicts by field name and array values are lists.
    """

    def __init__(
        self,
        registry: TypeRegistry,
        state_props: Optional[tuple[ParamEntity, ...]] = None,
        *,
        resolver: Optional[TypeResolver] = None,
        settings: Optional[ContractStateSettings] = None,
    ) -> None:
        self.log = logger.new()
        self.registry = registry
        self.state_props = registry.state_props if state_props is None else state_props
        self._settings = settings or get_global_settings()
        self.resolver = resolver or TypeResolver(registry, settings=self._settings)

    @classmethod
    def from_artifact(
        cls,
        artifact: ContractArtifact | Mapping[str, Any],
        *,
        settings: Optional[ContractStateSettings] = None,
    ) -> ContractState:
        return cls(TypeRegistry.from_artifact(artifact), settings=settings)

    def arguments(self, values: Optional[Mapping[str, Any]] = None) -> list[Argument]:
        """One argument per state property, with the value taken from `values` when given."""
        if values is not None:
            unknown = set(values) - {prop.name for prop in self.state_props}
            if unknown:
                raise ValueError('unknown state properties: ' + ', '.join(sorted(unknown)))
            missing = [prop.name for prop in self.state_props if prop.name not in values]
            if missing:
                raise ValueError('missing value for ' + ', '.join(missing))
        return [
            Argument.from_param(prop, self.resolver, None if values is None else values[prop.name])
            for prop in self.state_props
        ]

    def flatten(self, values: Mapping[str, Any]) -> list[FlattenedLeaf]:
        return flatten_all(self.arguments(values), state=True, settings=self._settings)

    def build(self, values: Mapping[str, Any], *, is_genesis: bool) -> StateBlob:
        """Build the state blob for the given property values."""
        return build_state(self.flatten(values), is_genesis, settings=self._settings)

    def parse(self, script: bytes | str) -> tuple[bool, dict[str, Any]]:
        """Read the state at the end of a locking script, returns the genesis flag and the property values."""
        blob = StateBlob.from_script(script)
        arguments = self.arguments()
        is_genesis, values = parse_state_leaves(blob, arguments, settings=self._settings)
        self.log.debug('state parsed', leaves=len(values), is_genesis=is_genesis)
        return is_genesis, {argument.name: argument.value for argument in unflatten(arguments, values, state=True)}

    def template(self) -> dict[str, bytes]:
        """Encoded placeholder of every state leaf, by leaf name."""
        return build_template(self.state_props, self.resolver, settings=self._settings)

    def default_values(self) -> dict[str, Any]:
        """Property values obtained by decoding the state template."""
        leaves = flatten_params(self.state_props, self.resolver, state=True, settings=self._settings)
        template = self.template()
        values: dict[str, LeafValue] = {
            leaf.name: decode_leaf(leaf.kind, template[leaf.name], name_path=leaf.name) for leaf in leaves
        }
        return {argument.name: argument.value for argument in unflatten(self.arguments(), values, state=True)}

    def values_from_json(self, json_values: Mapping[str, Any]) -> dict[str, Any]:
        """Convert property values read from JSON, where byte strings are hex, to their Python values."""
        leaves = flatten_all(self.arguments(json_values), state=True, settings=self._settings)
        values = {leaf.name: json_to_value(leaf.kind, leaf.value) for leaf in leaves}
        return {argument.name: argument.value for argument in unflatten(self.arguments(), values, state=True)}

    def values_to_json(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Inverse of `values_from_json`."""
        leaves = self.flatten(values)
        json_values = {leaf.name: value_to_json(leaf.kind, leaf.value) for leaf in leaves}
        return {argument.name: argument.value for argument in unflatten(self.arguments(), json_values, state=True)}
