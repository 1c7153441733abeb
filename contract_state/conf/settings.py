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

from pydantic import field_validator

from contract_state.consts import MAX_STATE_BODY_LENGTH
from contract_state.utils.pydantic import BaseModel


class ContractStateSettings(BaseModel):
    # Name of this configuration, only used for logging
    CONFIG_NAME: str = 'default'

    # Maximum depth of nested aliases, generics, structs and arrays when resolving a type. Also catches type
    # definitions that refer back to themselves through an alias that the cycle check cannot see.
    MAX_TYPE_NESTING: int = 32

    # Maximum number of leaves that a single flattening call can produce.
    MAX_STATE_LEAVES: int = 65536

    # Maximum size in bytes of the payload of a single non-boolean leaf, both when encoding and decoding.
    MAX_LEAF_SIZE: int = MAX_STATE_BODY_LENGTH

    @field_validator('MAX_TYPE_NESTING', 'MAX_STATE_LEAVES', 'MAX_LEAF_SIZE')
    @classmethod
    def _validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError('must be a positive integer')
        return value

    @field_validator('MAX_LEAF_SIZE')
    @classmethod
    def _validate_leaf_size(cls, value: int) -> int:
        if value > MAX_STATE_BODY_LENGTH:
            raise ValueError(f'cannot be larger than the maximum state body length ({MAX_STATE_BODY_LENGTH})')
        return value
