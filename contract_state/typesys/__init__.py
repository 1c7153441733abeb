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

from contract_state.typesys.descriptors import (
    ArrayType,
    LibraryType,
    PrimitiveType,
    StructType,
    TypeDescriptor,
)
from contract_state.typesys.registry import TypeRegistry
from contract_state.typesys.resolver import TypeResolver
from contract_state.typesys.type_name import TypeName, parse_type_name

__all__ = [
    'ArrayType',
    'LibraryType',
    'PrimitiveType',
    'StructType',
    'TypeDescriptor',
    'TypeName',
    'TypeRegistry',
    'TypeResolver',
    'parse_type_name',
]
