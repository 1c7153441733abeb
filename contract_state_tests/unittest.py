from typing import Any, Iterable, Optional
from unittest import TestCase as _TestCase, main as ut_main

from structlog import get_logger

from contract_state import ContractState, TypeRegistry, TypeResolver
from contract_state.conf.get_settings import get_global_settings
from contract_state.declarations import AliasEntity, LibraryEntity, ParamEntity, StaticEntity, StructEntity

logger = get_logger()
main = ut_main


def param(name: str, type_: str) -> ParamEntity:
    return ParamEntity(name=name, type=type_)


def struct(name: str, *fields: tuple[str, str], generic_types: Iterable[str] = ()) -> StructEntity:
    return StructEntity(
        name=name,
        params=tuple(param(n, t) for n, t in fields),
        generic_types=tuple(generic_types),
    )


def library(
    name: str,
    params: Iterable[tuple[str, str]],
    properties: Iterable[tuple[str, str]],
    generic_types: Iterable[str] = (),
) -> LibraryEntity:
    return LibraryEntity(
        name=name,
        params=tuple(param(n, t) for n, t in params),
        properties=tuple(param(n, t) for n, t in properties),
        generic_types=tuple(generic_types),
    )


def alias(name: str, type_: str) -> AliasEntity:
    return AliasEntity(name=name, type=type_)


def static(name: str, value: Any, type_: str = 'int') -> StaticEntity:
    return StaticEntity(name=name, type=type_, const=True, value=value)


def artifact_dict(
    state_props: Iterable[tuple[str, str]],
    *,
    structs: Iterable[dict[str, Any]] = (),
    library: Iterable[dict[str, Any]] = (),
    alias: Iterable[dict[str, Any]] = (),
    statics: Iterable[dict[str, Any]] = (),
) -> dict[str, Any]:
    """A compiled artifact as read from its JSON file, with only the fields used for the state."""
    return {
        'version': 9,
        'compilerVersion': '1.19.0',
        'contract': 'Test',
        'md5': 'd41d8cd98f00b204e9800998ecf8427e',
        'stateProps': [{'name': name, 'type': type_} for name, type_ in state_props],
        'structs': list(structs),
        'library': list(library),
        'alias': list(alias),
        'statics': list(statics),
        'abi': [],
        'hex': '',
    }


class TestCase(_TestCase):
    def setUp(self) -> None:
        self.log = logger.new()
        self.settings = get_global_settings()

    def create_registry(
        self,
        *,
        structs: Iterable[StructEntity] = (),
        libraries: Iterable[LibraryEntity] = (),
        aliases: Iterable[AliasEntity] = (),
        statics: Iterable[StaticEntity] = (),
        state_props: Iterable[ParamEntity] = (),
    ) -> TypeRegistry:
        return TypeRegistry(
            structs=structs,
            libraries=libraries,
            aliases=aliases,
            statics=statics,
            state_props=state_props,
        )

    def create_resolver(self, registry: Optional[TypeRegistry] = None, **kwargs: Any) -> TypeResolver:
        return TypeResolver(registry or self.create_registry(**kwargs), settings=self.settings)

    def create_contract(self, state_props: Iterable[tuple[str, str]], **kwargs: Any) -> ContractState:
        registry = self.create_registry(state_props=[param(n, t) for n, t in state_props], **kwargs)
        return ContractState(registry, settings=self.settings)
