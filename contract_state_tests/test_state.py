from contract_state.conf.settings import ContractStateSettings
from contract_state.exception import EmptyStateError, MalformedLeafError, TruncatedStateError, UnsupportedVersionError
from contract_state.flattening import Argument, FlattenedLeaf
from contract_state.state import StateBlob, build_state, build_template, parse_state
from contract_state.types import PrimitiveKind
from contract_state_tests import unittest
from contract_state_tests.unittest import library, param, struct

STRUCTS = [
    struct('Point', ('x', 'int'), ('y', 'int')),
    struct('Line', ('a', 'Point'), ('b', 'Point')),
]
LIBRARIES = [
    library('Counter', params=[('ctor.start', 'int')], properties=[('count', 'int'), ('done', 'bool')]),
]


class StateBlobTestCase(unittest.TestCase):
    def test_layout(self) -> None:
        blob = StateBlob(bytes.fromhex('01010501'))
        self.assertEqual(blob.body_length, 4)
        self.assertEqual(blob.version, 0)
        self.assertEqual(blob.trailer().hex(), '0400000000')
        self.assertEqual(blob.hex(), '010105010400000000')
        self.assertTrue(blob.is_genesis)

    def test_from_script(self) -> None:
        blob = StateBlob(bytes.fromhex('01010501'))
        # the state is found from the end, whatever comes before it
        script = bytes.fromhex('76a91400000000000000000000000000000000000000008807') + blob.to_bytes()
        self.assertEqual(StateBlob.from_script(script), blob)
        self.assertEqual(StateBlob.from_script(script.hex()), blob)
        self.assertEqual(StateBlob.from_script('0000000000'), StateBlob(b''))

    def test_from_script_errors(self) -> None:
        with self.assertRaises(TruncatedStateError):
            StateBlob.from_script('')
        with self.assertRaises(TruncatedStateError):
            StateBlob.from_script('01020304')
        with self.assertRaises(TruncatedStateError):
            StateBlob.from_script('010105010500000000')
        with self.assertRaises(UnsupportedVersionError) as cm:
            StateBlob.from_script('010105010400000001')
        self.assertEqual(cm.exception.version, 1)
        with self.assertRaises(MalformedLeafError):
            StateBlob.from_script('0101050104000000000')
        with self.assertRaises(MalformedLeafError):
            StateBlob.from_script('01 01 05 01 04 00 00 00 00')

    def test_invalid_blob(self) -> None:
        with self.assertRaises(ValueError):
            StateBlob(b'\x01', version=256)
        with self.assertRaises(MalformedLeafError):
            StateBlob(b'').is_genesis
        with self.assertRaises(MalformedLeafError):
            StateBlob(b'\x02').is_genesis

    def test_build_state(self) -> None:
        leaves = [FlattenedLeaf('counter', PrimitiveKind.INT, 5), FlattenedLeaf('done', PrimitiveKind.BOOL, True)]
        self.assertEqual(build_state(leaves, True).hex(), '010105010400000000')
        self.assertEqual(build_state(leaves, False).hex(), '000105010400000000')

        with self.assertRaises(EmptyStateError):
            build_state([], True)
        with self.assertRaises(TypeError):
            build_state(leaves, 1)  # type: ignore[arg-type]
        with self.assertRaises(TypeError):
            build_state([FlattenedLeaf('done', PrimitiveKind.BOOL, 1)], True)
        with self.assertRaisesRegex(ValueError, 'leaf counter has no value'):
            build_state([FlattenedLeaf('counter', PrimitiveKind.INT, None)], True)


class ContractStateTestCase(unittest.TestCase):
    def test_worked_example(self) -> None:
        contract = self.create_contract([('counter', 'int'), ('done', 'bool')])
        blob = contract.build({'counter': 5, 'done': True}, is_genesis=True)
        self.assertEqual(blob.body.hex(), '01010501')
        self.assertEqual(blob.trailer().hex(), '0400000000')
        self.assertEqual(contract.parse(blob.hex()), (True, {'counter': 5, 'done': True}))

    def test_vectors(self) -> None:
        contract = self.create_contract([('p', 'Point')], structs=STRUCTS)
        blob = contract.build({'p': {'x': 1, 'y': -2}}, is_genesis=False)
        self.assertEqual(blob.hex(), '0001010182' + '0500000000')

        contract = self.create_contract([('n', 'int')])
        self.assertEqual(contract.build({'n': 0}, is_genesis=True).hex(), '010100' + '0300000000')
        self.assertEqual(contract.parse('010100' + '0300000000'), (True, {'n': 0}))
        self.assertEqual(contract.parse('0100' + '0200000000'), (True, {'n': 0}))

        contract = self.create_contract([('b', 'bytes')])
        self.assertEqual(contract.build({'b': b''}, is_genesis=True).hex(), '0100' + '0200000000')
        self.assertEqual(contract.parse('0100' + '0200000000'), (True, {'b': b''}))

    def test_round_trip(self) -> None:
        contract = self.create_contract(
            [
                ('line', 'Line'),
                ('flags', 'bool[2]'),
                ('owner', 'PubKeyHash'),
                ('data', 'bytes'),
                ('big', 'int'),
                ('sh', 'SigHashType'),
                ('blob', 'bytes'),
                ('c', 'Counter'),
                ('grid', 'int[2][3]'),
            ],
            structs=STRUCTS,
            libraries=LIBRARIES,
        )
        values = {
            'line': {'a': {'x': 1, 'y': 2}, 'b': {'x': -3, 'y': 2**40}},
            'flags': [True, False],
            'owner': bytes(range(20)),
            'data': b'',
            'big': -(2**70),
            'sh': 0x41,
            'blob': b'\xaa' * 300,
            'c': {'count': 7, 'done': True},
            'grid': [[1, 2, 3], [4, 5, 6]],
        }
        blob = contract.build(values, is_genesis=False)
        script = bytes.fromhex('6a') + blob.to_bytes()
        self.assertEqual(contract.parse(script), (False, values))

    def test_parse_malformed(self) -> None:
        contract = self.create_contract([('counter', 'int'), ('done', 'bool')])

        with self.assertRaises(MalformedLeafError) as cm:
            contract.parse('01010502' + '0400000000')
        self.assertEqual(cm.exception.name_path, 'done')
        self.assertEqual(cm.exception.position, 3)

        with self.assertRaises(MalformedLeafError) as cm:
            contract.parse('02010501' + '0400000000')
        self.assertEqual(cm.exception.name_path, 'isGenesis')
        self.assertEqual(cm.exception.position, 0)

        with self.assertRaises(MalformedLeafError) as cm:
            contract.parse('010105' + '0300000000')
        self.assertEqual(cm.exception.name_path, 'done')

        with self.assertRaises(MalformedLeafError) as cm:
            contract.parse('4f010501' + '0400000000')
        self.assertEqual(cm.exception.name_path, 'isGenesis')

        with self.assertRaises(MalformedLeafError) as cm:
            contract.parse('014f0501' + '0400000000')
        self.assertEqual(cm.exception.name_path, 'counter')
        self.assertEqual(cm.exception.position, 1)

        with self.assertRaises(MalformedLeafError):
            contract.parse('0101050100' + '0500000000')

        with self.assertRaises(MalformedLeafError):
            contract.parse('' + '0000000000')

    def test_build_errors(self) -> None:
        contract = self.create_contract([('counter', 'int'), ('done', 'bool')])
        with self.assertRaises(TypeError):
            contract.build({'counter': '5', 'done': True}, is_genesis=True)
        with self.assertRaisesRegex(ValueError, 'done'):
            contract.build({'counter': 5}, is_genesis=True)
        with self.assertRaisesRegex(ValueError, 'other'):
            contract.build({'counter': 5, 'done': True, 'other': 1}, is_genesis=True)

    def test_empty_state(self) -> None:
        contract = self.create_contract([])
        with self.assertRaises(EmptyStateError):
            contract.build({}, is_genesis=True)
        with self.assertRaises(EmptyStateError):
            contract.parse('01' + '0100000000')
        with self.assertRaises(EmptyStateError):
            contract.template()

    def test_leaf_size_limit(self) -> None:
        self.settings = ContractStateSettings(MAX_LEAF_SIZE=4)
        contract = self.create_contract([('b', 'bytes')])
        self.assertEqual(contract.build({'b': b'1234'}, is_genesis=True).hex(), '010431323334' + '0600000000')
        with self.assertRaises(ValueError):
            contract.build({'b': b'12345'}, is_genesis=True)
        with self.assertRaises(MalformedLeafError):
            contract.parse('01053132333435' + '0700000000')

    def test_template(self) -> None:
        contract = self.create_contract(
            [('counter', 'int'), ('done', 'bool'), ('owner', 'PubKey'), ('items', 'int[2]'), ('p', 'Point')],
            structs=STRUCTS,
        )
        template = contract.template()
        self.assertEqual(list(template), ['counter', 'done', 'owner', 'items[0]', 'items[1]', 'p.x', 'p.y'])
        self.assertEqual({name: placeholder.hex() for name, placeholder in template.items()}, {
            'counter': '0100',
            'done': '01',
            'owner': '0100',
            'items[0]': '0100',
            'items[1]': '0100',
            'p.x': '0100',
            'p.y': '0100',
        })
        self.assertEqual(contract.default_values(), {
            'counter': 0,
            'done': True,
            'owner': b'\x00',
            'items': [0, 0],
            'p': {'x': 0, 'y': 0},
        })

    def test_library_state_template(self) -> None:
        contract = self.create_contract([('c', 'Counter')], libraries=LIBRARIES)
        self.assertEqual(list(contract.template()), ['c.count', 'c.done'])
        self.assertEqual(contract.default_values(), {'c': {'count': 0, 'done': True}})

    def test_module_functions(self) -> None:
        contract = self.create_contract([('counter', 'int'), ('p', 'Point')], structs=STRUCTS)
        declared = [param('counter', 'int'), param('p', 'Point')]
        blob = contract.build({'counter': 3, 'p': {'x': 4, 'y': 5}}, is_genesis=True)

        is_genesis, arguments = parse_state(blob.to_bytes(), declared, contract.resolver)
        self.assertTrue(is_genesis)
        self.assertEqual(arguments, [
            Argument('counter', contract.resolver.resolve('int'), 3),
            Argument('p', contract.resolver.resolve('Point'), {'x': 4, 'y': 5}),
        ])
        self.assertEqual(build_template(declared, contract.resolver), contract.template())

    def test_json_values(self) -> None:
        contract = self.create_contract([('owner', 'PubKey'), ('points', 'Point[2]'), ('big', 'int')], structs=STRUCTS)
        json_values = {
            'owner': 'ab' * 33,
            'points': [{'x': 1, 'y': 2}, {'x': 3, 'y': 4}],
            'big': str(2**80),
        }
        values = contract.values_from_json(json_values)
        self.assertEqual(values['owner'], b'\xab' * 33)
        self.assertEqual(values['big'], 2**80)
        self.assertEqual(values['points'], json_values['points'])
        self.assertEqual(contract.values_to_json(values), {**json_values, 'big': 2**80})
