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

r"""
Parser for the type names found in declarations, like `int`, `Pair<int, bytes>[2]` or `ST[Test.N][0x03]`.

Grammar, whitespace is allowed between tokens:

    TypeName := Name [ '<' TypeName (',' TypeName)* '>' ] ( '[' Dim ']' )*

A dimension is kept as written, it can be a literal or the name of a static, so it can only be evaluated against a
registry. The decorated forms `struct Foo {}`, `library Foo {}` and `contract Foo {}` are read as `Foo`.

>>> parse_type_name('int')
TypeName(base='int', generic_args=(), dims=())
>>> str(parse_type_name('Pair< int,bytes >[2]'))
'Pair<int,bytes>[2]'
>>> parse_type_name('struct ST1 {}[3]').dims
('3',)
>>> str(parse_type_name('M<L<int>[2]>'))
'M<L<int>[2]>'
>>> parse_type_name('int[')
Traceback (most recent call last):
...
contract_state.exception.TypeResolutionError: invalid type name 'int[': expected an array size at position 4
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace

from contract_state.exception import TypeResolutionError

_NAME_RE = re.compile(r'[A-Za-z_][A-Za-z0-9_.]*')
_DIM_RE = re.compile(r'[^\[\]<>,\s]+')
_DECORATION_RE = re.compile(r'^\s*(?:struct|library|contract)\s+([A-Za-z_][A-Za-z0-9_.]*)\s*\{\s*\}')


@dataclass(slots=True, frozen=True)
class TypeName:
    base: str
    generic_args: tuple[TypeName, ...] = ()
    dims: tuple[str, ...] = ()

    def without_first_dim(self) -> TypeName:
        return replace(self, dims=self.dims[1:])

    def __str__(self) -> str:
        text = self.base
        if self.generic_args:
            text += '<' + ','.join(str(arg) for arg in self.generic_args) + '>'
        return text + ''.join(f'[{dim}]' for dim in self.dims)


def parse_type_name(type_name: str) -> TypeName:
    """ Parse a declared type name, the docstring of this module has the grammar and examples.
    """
    text = _DECORATION_RE.sub(r'\1', type_name, count=1)
    parser = _Parser(type_name, text)
    result = parser.parse_type()
    parser.expect_end()
    return result


class _Parser:
    def __init__(self, original: str, text: str) -> None:
        self.original = original
        self.text = text
        self.pos = 0

    def fail(self, reason: str) -> TypeResolutionError:
        return TypeResolutionError(f'invalid type name {self.original!r}: {reason} at position {self.pos}')

    def skip_spaces(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def peek(self) -> str:
        self.skip_spaces()
        return self.text[self.pos] if self.pos < len(self.text) else ''

    def expect(self, char: str) -> None:
        if self.peek() != char:
            raise self.fail(f'expected {char!r}')
        self.pos += 1

    def match(self, pattern: re.Pattern[str], what: str) -> str:
        self.skip_spaces()
        m = pattern.match(self.text, self.pos)
        if m is None:
            raise self.fail(f'expected {what}')
        self.pos = m.end()
        return m.group()

    def parse_type(self) -> TypeName:
        base = self.match(_NAME_RE, 'a type name')
        generic_args: list[TypeName] = []
        if self.peek() == '<':
            self.pos += 1
            generic_args.append(self.parse_type())
            while self.peek() == ',':
                self.pos += 1
                generic_args.append(self.parse_type())
            self.expect('>')
        dims: list[str] = []
        while self.peek() == '[':
            self.pos += 1
            dims.append(self.match(_DIM_RE, 'an array size'))
            self.expect(']')
        return TypeName(base, tuple(generic_args), tuple(dims))

    def expect_end(self) -> None:
        if self.peek():
            raise self.fail('unexpected character')
