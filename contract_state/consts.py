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

# Version of the state body layout, written in the last byte of every state blob.
CURRENT_STATE_VERSION: int = 0

# Versions that the parser knows how to walk. Future versions must be additive.
SUPPORTED_STATE_VERSIONS: frozenset[int] = frozenset({CURRENT_STATE_VERSION})

# Width of the body length field, it caps a state body at 2**32 - 1 bytes.
STATE_LENGTH_FIELD_SIZE: int = 4

# Width of the version field.
STATE_VERSION_FIELD_SIZE: int = 1

STATE_TRAILER_SIZE: int = STATE_LENGTH_FIELD_SIZE + STATE_VERSION_FIELD_SIZE

# struct format of the trailer: little-endian u32 length followed by u8 version
STATE_TRAILER_FORMAT: str = '<IB'

MAX_STATE_BODY_LENGTH: int = 2**(8 * STATE_LENGTH_FIELD_SIZE) - 1
