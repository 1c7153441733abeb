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

import os
from typing import NamedTuple, Optional

from structlog import get_logger

from contract_state import conf
from contract_state.conf.settings import ContractStateSettings
from contract_state.conf.utils import load_module_settings, load_yaml_settings

logger = get_logger()

# python module that exports a `SETTINGS` object, takes precedence over the YAML file
CONFIG_FILE_ENV_VAR = 'CONTRACT_STATE_CONFIG_FILE'
CONFIG_YAML_ENV_VAR = 'CONTRACT_STATE_CONFIG_YAML'


class _SettingsSource(NamedTuple):
    path: str
    is_yaml: bool


class _LoadedSettings(NamedTuple):
    source: _SettingsSource
    settings: ContractStateSettings


_settings_singleton: Optional[_LoadedSettings] = None


def _source_from_env() -> _SettingsSource:
    module_path = os.environ.get(CONFIG_FILE_ENV_VAR)
    if module_path is not None:
        return _SettingsSource(module_path, is_yaml=False)
    return _SettingsSource(os.environ.get(CONFIG_YAML_ENV_VAR, conf.DEFAULT_SETTINGS_FILEPATH), is_yaml=True)


def get_global_settings() -> ContractStateSettings:
    """ Settings of this process, loaded on the first call.

    The source is read from the environment: the python module in `CONTRACT_STATE_CONFIG_FILE` if set, otherwise the
    YAML file in `CONTRACT_STATE_CONFIG_YAML`, and the bundled `default.yml` when neither is set. Changing the source
    after the settings were loaded is an error.
    """
    global _settings_singleton

    source = _source_from_env()
    if _settings_singleton is not None:
        if _settings_singleton.source != source:
            raise Exception(f'settings already loaded from {_settings_singleton.source.path}, not {source.path}')
        return _settings_singleton.settings

    loader = load_yaml_settings if source.is_yaml else load_module_settings
    settings = loader(ContractStateSettings, source.path)
    logger.debug('settings loaded', source=source.path, config_name=settings.CONFIG_NAME)
    _settings_singleton = _LoadedSettings(source, settings)
    return settings


def get_settings_source() -> str:
    """ Returns the path of the settings module or YAML file that was loaded.

    XXX: Will raise an assertion error if get_global_settings() wasn't used before.
    """
    assert _settings_singleton is not None, 'get_global_settings() not called before'
    return _settings_singleton.source.path
