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

import sys
from typing import Optional


def main(argv: Optional[list[str]] = None) -> int:
    from contract_state import ContractStateError
    from contract_state_cli.util import add_artifact_argument, create_parser, load_contract_state, print_json

    parser = create_parser()
    add_artifact_argument(parser)
    parser.add_argument('--defaults', action='store_true',
                        help='Print the default value of every state property instead of the leaf placeholders')
    args = parser.parse_args(argv)

    contract = load_contract_state(args.artifact)
    try:
        if args.defaults:
            print_json(contract.values_to_json(contract.default_values()))
        else:
            print_json({name: placeholder.hex() for name, placeholder in contract.template().items()})
    except ContractStateError as e:
        print(f'error: {e}', file=sys.stderr)
        return 1
    return 0
