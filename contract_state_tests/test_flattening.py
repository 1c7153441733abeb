from contract_state.conf.settings import ContractStateSettings
from contract_state.exception import EmptyStateError
from contract_state.flattening import Argument, FlattenedLeaf, flatten, flatten_all, flatten_params, unflatten
from contract_state.types import PrimitiveKind
from contract_state_tests import unittest
from contract_state_tests.unittest import library, param, struct


class FlatteningTestCase(unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.resolver = self.create_resolver(
            structs=[
                struct('Point', ('x', 'int'), ('y', 'int')),
                struct('Line', ('a', 'Point'), ('b', 'Point'), ('label', 'bytes')),
            ],
            libraries=[
                library('Counter', params=[('ctor.start', 'int')], properties=[('count', 'int'), ('done', 'bool')]),
            ],
        )

    def _argument(self, name: str, type_name: str, value: object = None) -> Argument:
        return Argument(name, self.resolver.resolve(type_name), value)

    def _names(self, leaves: list[FlattenedLeaf]) -> list[str]:
        return [leaf.name for leaf in leaves]

    def test_primitive(self) -> None:
        leaves = flatten(self._argument('counter', 'int', 5), state=True)
        self.assertEqual(leaves, [FlattenedLeaf('counter', PrimitiveKind.INT, 5)])

    def test_struct_of_structs(self) -> None:
        value = {'a': {'x': 1, 'y': 2}, 'b': {'x': 3, 'y': 4}, 'label': b'l'}
        leaves = flatten(self._argument('line', 'Line', value), state=True)
        self.assertEqual(self._names(leaves), ['line.a.x', 'line.a.y', 'line.b.x', 'line.b.y', 'line.label'])
        self.assertEqual([leaf.value for leaf in leaves], [1, 2, 3, 4, b'l'])

    def test_array_of_structs(self) -> None:
        value = [{'x': 1, 'y': 2}, {'x': 3, 'y': 4}]
        leaves = flatten(self._argument('points', 'Point[2]', value), state=True)
        self.assertEqual(self._names(leaves), ['points[0].x', 'points[0].y', 'points[1].x', 'points[1].y'])
        self.assertEqual([leaf.value for leaf in leaves], [1, 2, 3, 4])

    def test_nested_arrays(self) -> None:
        value = [[True, False, True], (False, False, True)]
        leaves = flatten(self._argument('flags', 'bool[2][3]', value), state=True)
        self.assertEqual(
            self._names(leaves),
            ['flags[0][0]', 'flags[0][1]', 'flags[0][2]', 'flags[1][0]', 'flags[1][1]', 'flags[1][2]'],
        )
        self.assertEqual([leaf.value for leaf in leaves], [True, False, True, False, False, True])
        self.assertTrue(all(leaf.kind is PrimitiveKind.BOOL for leaf in leaves))

    def test_library_state_flag(self) -> None:
        state_leaves = flatten(self._argument('c', 'Counter', {'count': 2, 'done': True}), state=True)
        self.assertEqual(self._names(state_leaves), ['c.count', 'c.done'])

        ctor_leaves = flatten(self._argument('c', 'Counter', {'ctor.start': 1}), state=False)
        self.assertEqual(ctor_leaves, [FlattenedLeaf('c.ctor.start', PrimitiveKind.INT, 1)])

    def test_state_flag_does_not_affect_structs(self) -> None:
        argument = self._argument('points', 'Point[2]')
        self.assertEqual(
            flatten(argument, state=True, ignore_value=True),
            flatten(argument, state=False, ignore_value=True),
        )

    def test_ignore_value(self) -> None:
        resolver = self.create_resolver(structs=[
            struct('All', ('b', 'bool'), ('i', 'int'), ('k', 'PrivKey'), ('s', 'SigHashType'), ('p', 'PubKey'),
                   ('h', 'Sha256'), ('o', 'OpCodeType')),
        ])
        leaves = flatten(Argument('all', resolver.resolve('All'), 'not read'), state=True, ignore_value=True)
        self.assertEqual([leaf.value for leaf in leaves], [False, 0, 0, 0, b'', b'', b''])

    def test_value_errors(self) -> None:
        with self.assertRaisesRegex(ValueError, 'line.label'):
            flatten(self._argument('line', 'Line', {'a': {'x': 1, 'y': 2}, 'b': {'x': 3, 'y': 4}}), state=True)
        with self.assertRaisesRegex(ValueError, '2 elements'):
            flatten(self._argument('points', 'Point[2]', [{'x': 1, 'y': 2}]), state=True)
        with self.assertRaisesRegex(TypeError, 'points'):
            flatten(self._argument('points', 'Point[2]', {'x': 1, 'y': 2}), state=True)
        with self.assertRaisesRegex(TypeError, 'points'):
            flatten(self._argument('points', 'int[2]', b'\x01\x02'), state=True)
        with self.assertRaisesRegex(TypeError, 'line.a'):
            flatten(self._argument('line', 'Line', {'a': [1, 2], 'b': {'x': 3, 'y': 4}, 'label': b''}), state=True)
        with self.assertRaisesRegex(ValueError, 'counter'):
            flatten(self._argument('counter', 'int'), state=True)

    def test_unknown_member_fields(self) -> None:
        with self.assertRaisesRegex(ValueError, r'unknown fields of Point: p\.z'):
            flatten(self._argument('p', 'Point', {'x': 1, 'y': 2, 'z': 99}), state=True)
        with self.assertRaisesRegex(ValueError, r'line\.b\.w'):
            value = {'a': {'x': 1, 'y': 2}, 'b': {'x': 3, 'y': 4, 'w': 0}, 'label': b''}
            flatten(self._argument('line', 'Line', value), state=True)
        # constructor params are not fields of the stored state
        with self.assertRaisesRegex(ValueError, r'c\.ctor\.start'):
            flatten(self._argument('c', 'Counter', {'count': 1, 'done': False, 'ctor.start': 0}), state=True)

    def test_flatten_all(self) -> None:
        arguments = [self._argument('counter', 'int', 1), self._argument('p', 'Point', {'x': 2, 'y': 3})]
        leaves = flatten_all(arguments, state=True)
        self.assertEqual(self._names(leaves), ['counter', 'p.x', 'p.y'])

    def test_flatten_all_empty(self) -> None:
        with self.assertRaises(EmptyStateError):
            flatten_all([], state=True)
        self.assertEqual(flatten_all([], state=False), [])

    def test_max_leaves(self) -> None:
        self.settings = ContractStateSettings(MAX_STATE_LEAVES=10)
        argument = self._argument('values', 'int[10]')
        self.assertEqual(len(flatten(argument, state=True, ignore_value=True, settings=self.settings)), 10)
        with self.assertRaisesRegex(ValueError, 'too many leaves'):
            flatten_all([argument, self._argument('extra', 'bool')], state=True, ignore_value=True,
                        settings=self.settings)

    def test_flatten_params(self) -> None:
        params = [param('counter', 'int'), param('p', 'Point')]
        leaves = flatten_params(params, self.resolver, {'counter': 1, 'p': {'x': 2, 'y': 3}}, state=True)
        self.assertEqual([leaf.value for leaf in leaves], [1, 2, 3])

        defaults = flatten_params(params, self.resolver, state=True)
        self.assertEqual([leaf.value for leaf in defaults], [0, 0, 0])

        with self.assertRaisesRegex(ValueError, 'missing value for p'):
            flatten_params(params, self.resolver, {'counter': 1}, state=True)

    def test_unflatten(self) -> None:
        arguments = [
            self._argument('line', 'Line', {'a': {'x': 1, 'y': 2}, 'b': {'x': 3, 'y': 4}, 'label': b'l'}),
            self._argument('flags', 'bool[2][2]', [[True, False], [False, True]]),
            self._argument('c', 'Counter', {'count': 9, 'done': False}),
        ]
        leaves = flatten_all(arguments, state=True)
        rebuilt = unflatten(arguments, {leaf.name: leaf.value for leaf in leaves}, state=True)
        self.assertEqual(rebuilt, arguments)

    def test_unflatten_missing_leaf(self) -> None:
        argument = self._argument('p', 'Point')
        with self.assertRaisesRegex(ValueError, 'p.y'):
            unflatten([argument], {'p.x': 1}, state=True)
