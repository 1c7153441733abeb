import os

import pytest

from contract_state.conf import UNITTESTS_SETTINGS_FILEPATH
from contract_state_cli.util import LoggingOptions, LoggingOutput, setup_logging

os.environ['CONTRACT_STATE_CONFIG_YAML'] = os.environ.get(
    'CONTRACT_STATE_TEST_CONFIG_YAML',
    UNITTESTS_SETTINGS_FILEPATH,
)


@pytest.fixture(autouse=True, scope='session')
def _silence_logs() -> None:
    # commands print their results on stdout, structlog's default logger would print there too
    setup_logging(logging_output=LoggingOutput.NULL, logging_options=LoggingOptions(debug=False))
