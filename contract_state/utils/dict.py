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

from typing import Any, Mapping


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """ Return a new dict with the keys of `override` merged over `base`, nested dicts are merged key by key.

    Neither input is modified.

    >>> deep_merge({'a': 1, 'b': {'c': 2, 'd': 3}}, {'b': {'d': 4}, 'e': 5})
    {'a': 1, 'b': {'c': 2, 'd': 4}, 'e': 5}
    >>> deep_merge({'a': {'b': 1}}, {'a': 2})
    {'a': 2}
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged
