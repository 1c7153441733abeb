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

from structlog import get_logger

logger = get_logger()


def main(argv: Optional[list[str]] = None) -> int:
    from contract_state import ContractStateError
    from contract_state_cli.util import add_artifact_argument, create_parser, load_contract_state, load_json_file

    parser = create_parser()
    add_artifact_argument(parser)
    parser.add_argument('--values', required=True,
                        help='Path to a JSON object with the value of every state property, bytes as hex strings')
    parser.add_argument('--genesis', action='store_true', help='Mark the state as the first state of the contract')
    args = parser.parse_args(argv)

    contract = load_contract_state(args.artifact)
    try:
        values = contract.values_from_json(load_json_file(args.values))
        blob = contract.build(values, is_genesis=args.genesis)
    except (ContractStateError, TypeError, ValueError) as e:
        print(f'error: {e}', file=sys.stderr)
        return 1

    logger.info('state built', body_length=blob.body_length, is_genesis=args.genesis)
    print(blob.hex())
    return 0
