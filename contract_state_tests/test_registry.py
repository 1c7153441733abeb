import pytest

from contract_state import ContractArtifact, ContractState, TypeRegistry, TypeResolver
from contract_state.declarations import ParamEntity, resolve_const_value
from contract_state.types import PrimitiveKind
from contract_state.typesys import ArrayType, PrimitiveType, StructType
from contract_state_tests.unittest import artifact_dict

AST_ROOT = {
    'structs': [
        {'name': 'Point', 'fields': [{'name': 'x', 'type': 'int'}, {'name': 'y', 'type': 'int'}], 'genericTypes': []},
    ],
    'alias': [{'alias': 'Coord', 'type': 'int'}],
    'contracts': [
        {
            'nodeType': 'Library',
            'name': 'Counter',
            'constructor': {'params': [{'name': 'start', 'type': 'int'}]},
            'properties': [{'name': 'this.count', 'type': 'int'}],
            'genericTypes': [],
            'statics': [],
        },
        {
            'nodeType': 'Library',
            'name': 'Pt',
            'properties': [{'name': 'this.a', 'type': 'Coord'}],
        },
        {
            'nodeType': 'Library',
            'name': 'Helpers',
            'properties': [],
        },
        {
            'nodeType': 'Contract',
            'name': 'Test',
            'properties': [
                {'name': 'this.counter', 'type': 'int', 'state': True},
                {'name': 'this.owner', 'type': 'PubKey'},
                {'name': 'this.points', 'type': 'Point[Test.N]', 'state': True},
            ],
            'statics': [
                {'name': 'N', 'type': 'int', 'const': True, 'expr': {'nodeType': 'IntLiteral', 'value': 2}},
                {'name': 'FLAG', 'type': 'bool', 'const': True, 'expr': {'nodeType': 'BoolLiteral', 'value': True}},
            ],
        },
    ],
}

DEPENDENCY_ASTS = {
    'std': {
        'contracts': [{'nodeType': 'Library', 'name': 'Std', 'properties': [{'name': 'this.x', 'type': 'int'}]}],
    },
    '/contracts/lib.scrypt': {
        'structs': [{'name': 'Other', 'fields': [{'name': 'v', 'type': 'bytes'}]}],
        'contracts': [{'nodeType': 'Contract', 'name': 'Test', 'properties': [{'name': 'this.z', 'type': 'int'}]}],
    },
}


def test_from_ast() -> None:
    registry = TypeRegistry.from_ast(AST_ROOT, DEPENDENCY_ASTS)

    assert set(registry.structs) == {'Point', 'Other'}
    assert set(registry.libraries) == {'Counter', 'Pt'}
    assert set(registry.contracts) == {'Test'}
    assert registry.aliases['Coord'] == 'int'
    assert registry.aliases['PubKeyHash'] == 'Ripemd160'

    counter = registry.libraries['Counter']
    assert counter.params == (ParamEntity(name='ctor.start', type='int'),)
    assert counter.properties == (ParamEntity(name='count', type='int'),)

    # without an explicit constructor every property is a parameter
    pt = registry.libraries['Pt']
    assert pt.params == pt.properties == (ParamEntity(name='a', type='Coord'),)

    # the main contract wins over a dependency with the same name
    assert registry.contracts['Test'].properties[0].name == 'counter'

    assert registry.statics['Test.N'].value == 2
    assert registry.statics['Test.FLAG'].value is None
    assert registry.state_props == (
        ParamEntity(name='counter', type='int'),
        ParamEntity(name='points', type='Point[Test.N]'),
    )

    resolver = TypeResolver(registry)
    point = StructType('Point', (('x', PrimitiveType(PrimitiveKind.INT)), ('y', PrimitiveType(PrimitiveKind.INT))))
    assert resolver.resolve('Point[Test.N]') == ArrayType(point, 2)


def test_from_ast_contract_state() -> None:
    contract = ContractState(TypeRegistry.from_ast(AST_ROOT, DEPENDENCY_ASTS))
    assert list(contract.template()) == ['counter', 'points[0].x', 'points[0].y', 'points[1].x', 'points[1].y']


def test_from_artifact() -> None:
    data = artifact_dict(
        [('counter', 'int'), ('c', 'Counter')],
        structs=[{'name': 'Pair', 'params': [{'name': 'k', 'type': 'K'}], 'genericTypes': ['K']}],
        library=[{
            'name': 'Counter',
            'params': [{'name': 'ctor.start', 'type': 'int'}],
            'properties': [{'name': 'count', 'type': 'int'}],
            'genericTypes': [],
        }],
        alias=[{'name': 'Coord', 'type': 'int'}],
        statics=[{'name': 'Test.N', 'type': 'int', 'const': True, 'value': 3}],
    )
    artifact = ContractArtifact.model_validate(data)
    assert artifact.contract == 'Test'
    assert artifact.structs[0].generic_types == ('K',)

    for source in (data, artifact):
        registry = TypeRegistry.from_artifact(source)
        assert [prop.name for prop in registry.state_props] == ['counter', 'c']
        assert registry.structs['Pair'].generic_types == ('K',)
        assert registry.libraries['Counter'].properties[0].name == 'count'
        assert registry.aliases['Coord'] == 'int'
        assert registry.find_static_value('N') == 3


@pytest.mark.parametrize(
    ['expr', 'expected'],
    [
        (None, None),
        ({'nodeType': 'IntLiteral', 'value': '12'}, 12),
        ({'nodeType': 'IntLiteral', 'value': 0}, 0),
        ({'nodeType': 'BoolLiteral', 'value': False}, False),
        ({'nodeType': 'BytesLiteral', 'value': [0, 1, 255]}, b'\x00\x01\xff'),
        ({'nodeType': 'UnaryExpr', 'op': 'negate', 'expr': {'nodeType': 'IntLiteral', 'value': 5}}, -5),
        ({'nodeType': 'UnaryExpr', 'op': 'negate', 'expr': {'nodeType': 'BoolLiteral', 'value': True}}, None),
        ({'nodeType': 'UnaryExpr', 'op': 'not', 'expr': {'nodeType': 'BoolLiteral', 'value': True}}, None),
        ({'nodeType': 'BinaryExpr', 'op': '+'}, None),
    ],
)
def test_resolve_const_value(expr: dict, expected: object) -> None:
    assert resolve_const_value(expr) == expected
