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

from enum import IntEnum


class Opcode(IntEnum):
    """Opcodes that can start a push-data element.

    Only the subset needed to frame state leaves is listed, opcodes 0x01 through 0x4b have no name, they push as many
    bytes as their own value.
    """
    OP_0 = 0x00
    OP_PUSHDATA1 = 0x4C
    OP_PUSHDATA2 = 0x4D
    OP_PUSHDATA4 = 0x4E

    @classmethod
    def is_pushdata(cls, opcode: int) -> bool:
        """Whether `opcode` can start a push-data element.

        >>> Opcode.is_pushdata(0x00), Opcode.is_pushdata(0x4b), Opcode.is_pushdata(0x4e), Opcode.is_pushdata(0x51)
        (True, True, True, False)
        """
        # OP_0 and the direct pushes share one range
        if 0 <= opcode <= MAX_DIRECT_PUSH_LENGTH:
            return True
        return opcode in (cls.OP_PUSHDATA1, cls.OP_PUSHDATA2, cls.OP_PUSHDATA4)


# Largest payload that is pushed with a single length byte as the opcode.
MAX_DIRECT_PUSH_LENGTH: int = 75
