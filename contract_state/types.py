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

from enum import Enum, unique
from typing import NewType, Optional, TypeAlias

# Types used for the values of byte-like leaves.
PubKey = NewType('PubKey', bytes)
Sig = NewType('Sig', bytes)
Ripemd160 = NewType('Ripemd160', bytes)
PubKeyHash = Ripemd160
Sha1 = NewType('Sha1', bytes)
Sha256 = NewType('Sha256', bytes)
SigHashPreimage = NewType('SigHashPreimage', bytes)
OpCodeType = NewType('OpCodeType', bytes)

# Types used for the values of integer-like leaves.
PrivKey = NewType('PrivKey', int)
SigHashType = NewType('SigHashType', int)

LeafValue: TypeAlias = bool | int | bytes


@unique
class PrimitiveKind(Enum):
    """Every type that can be a leaf, the value is the name used for it in contract declarations."""
    BOOL = 'bool'
    INT = 'int'
    BYTES = 'bytes'
    PRIVKEY = 'PrivKey'
    PUBKEY = 'PubKey'
    SIG = 'Sig'
    RIPEMD160 = 'Ripemd160'
    SHA1 = 'Sha1'
    SHA256 = 'Sha256'
    SIGHASHTYPE = 'SigHashType'
    SIGHASHPREIMAGE = 'SigHashPreimage'
    OPCODETYPE = 'OpCodeType'

    @classmethod
    def from_type_name(cls, type_name: str) -> Optional[PrimitiveKind]:
        """Return the kind declared with this exact name, or None."""
        try:
            return cls(type_name)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


# Built-in aliases, available even if the contract declares none.
BUILTIN_TYPE_ALIASES: dict[str, str] = {
    'PubKeyHash': PrimitiveKind.RIPEMD160.value,
}
