import os
import tempfile

import pytest
from pydantic import ValidationError

from contract_state.conf import DEFAULT_SETTINGS_FILEPATH, UNITTESTS_SETTINGS_FILEPATH
from contract_state.conf.get_settings import get_global_settings, get_settings_source
from contract_state.conf.settings import ContractStateSettings
from contract_state.conf.utils import load_yaml_settings
from contract_state.consts import MAX_STATE_BODY_LENGTH


def test_unittests_settings() -> None:
    settings = get_global_settings()
    assert get_settings_source() == UNITTESTS_SETTINGS_FILEPATH
    assert settings.CONFIG_NAME == 'unittests'
    assert settings.MAX_STATE_LEAVES == 4096
    assert settings.MAX_LEAF_SIZE == 1048576
    # inherited from the default settings
    assert settings.MAX_TYPE_NESTING == 32
    assert get_global_settings() is settings


def test_default_settings() -> None:
    settings = load_yaml_settings(ContractStateSettings, DEFAULT_SETTINGS_FILEPATH)
    assert settings == ContractStateSettings()
    assert settings.MAX_LEAF_SIZE == MAX_STATE_BODY_LENGTH


def test_extends() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        filepath = os.path.join(tmpdir, 'custom.yml')
        with open(filepath, 'w') as fp:
            fp.write('extends: unittests.yml\nCONFIG_NAME: custom\nMAX_TYPE_NESTING: 8\n')
        settings = load_yaml_settings(ContractStateSettings, filepath)

    assert settings.CONFIG_NAME == 'custom'
    assert settings.MAX_TYPE_NESTING == 8
    assert settings.MAX_STATE_LEAVES == 4096


@pytest.mark.parametrize(
    'kwargs',
    [
        dict(MAX_TYPE_NESTING=0),
        dict(MAX_STATE_LEAVES=-1),
        dict(MAX_LEAF_SIZE=MAX_STATE_BODY_LENGTH + 1),
        dict(UNKNOWN_SETTING=1),
    ],
)
def test_invalid_settings(kwargs: dict) -> None:
    with pytest.raises(ValidationError):
        ContractStateSettings(**kwargs)


def test_frozen() -> None:
    settings = ContractStateSettings()
    with pytest.raises(ValidationError):
        settings.MAX_TYPE_NESTING = 1  # type: ignore[misc]
