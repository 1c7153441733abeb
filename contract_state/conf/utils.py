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

import importlib
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel

T = TypeVar('T', bound=BaseModel)

# a relative `extends` that is not found next to the extending file is looked up among the bundled settings files
BUNDLED_SETTINGS_DIR = Path(__file__).parent


def load_yaml_settings(model: type[T], filepath: str) -> T:
    """Validate the settings in a YAML file, which can extend another one with the `extends` key."""
    from contract_state.utils.yaml import model_from_extended_yaml
    return model_from_extended_yaml(model, filepath, search_root=BUNDLED_SETTINGS_DIR)


def load_module_settings(model: type[T], module_path: str) -> T:
    """Load a python module that defines a `SETTINGS` object and validate it with the given model."""
    settings_module = importlib.import_module(module_path)
    settings = getattr(settings_module, 'SETTINGS')
    if isinstance(settings, model):
        return settings
    return model.model_validate(settings)
