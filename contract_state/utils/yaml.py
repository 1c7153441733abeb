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

from pathlib import Path
from typing import Any, Optional, TypeVar

import yaml
from pydantic import BaseModel

from contract_state.utils.dict import deep_merge

# key that names another YAML file to use as the base of the current one
EXTENDS_KEY = 'extends'

T = TypeVar('T', bound=BaseModel)


def load_yaml_mapping(path: Path) -> dict[str, Any]:
    """Read a YAML file whose top level is a mapping, an empty file is an empty mapping."""
    if not path.is_file():
        raise ValueError(f'{str(path)!r} is not a file')
    with path.open('r') as fp:
        contents = yaml.safe_load(fp)
    if contents is None:
        return {}
    if not isinstance(contents, dict):
        raise ValueError(f'{str(path)!r} does not contain a mapping')
    return contents


def _find_base(path: Path, base_name: str, search_root: Optional[Path]) -> Path:
    # relative to the extending file first, then relative to the search root
    candidate = path.parent / base_name
    if not candidate.is_file() and search_root is not None:
        candidate = search_root / base_name
    return candidate


def load_extended_yaml(path: Path | str, *, search_root: Optional[Path] = None) -> dict[str, Any]:
    """ Read a YAML mapping, following its `extends` key.

    The file named by `extends` is loaded (and extended) first and the current file is merged over it. The key itself
    is not part of the result.
    """
    chain: list[dict[str, Any]] = []
    seen: set[Path] = set()
    current: Optional[Path] = Path(path)
    while current is not None:
        resolved = current.resolve()
        if resolved in seen:
            raise ValueError(f'{str(current)!r} extends itself')
        seen.add(resolved)
        contents = load_yaml_mapping(current)
        base_name = contents.pop(EXTENDS_KEY, None)
        chain.append(contents)
        current = _find_base(current, str(base_name), search_root) if base_name else None

    result: dict[str, Any] = {}
    for contents in reversed(chain):
        result = deep_merge(result, contents)
    return result


def model_from_extended_yaml(model: type[T], path: Path | str, *, search_root: Optional[Path] = None) -> T:
    """Validate the contents of an extended YAML file with a pydantic model."""
    return model.model_validate(load_extended_yaml(path, search_root=search_root))
