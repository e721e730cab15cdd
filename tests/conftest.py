import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests


# Disable X-Ray tracing for tests
os.environ["POWERTOOLS_TRACE_DISABLED"] = "true"

# Add app directory to path for imports
app_dir = Path(__file__).parent.parent / "app"
sys.path.insert(0, str(app_dir))


@pytest.fixture
def sync_env():
    return {
        "PAGERDUTY_APIKEY": "pd-key",
        "MATTERMOST_URL": "https://chat.example.com/",
        "MATTERMOST_BOT_TOKEN": "bot-token",
        "MATTERMOST_SREONCALL_GROUPID": "oncall-group",
        "MATTERMOST_SRESUPPORT_GROUPID": "support-group",
        "MATTERMOST_SREONCALL_NOTIFICATION_HOOK": "https://chat.example.com/hooks/oncall",
        "MATTERMOST_SRESUPPORT_NOTIFICATION_HOOK": "https://chat.example.com/hooks/support",
        "ONCALL_HOUR_SHIFTS": "12",
        "PRIMARY_SCHEDULE_ID": "PPRIMARY",
        "SECONDARY_SCHEDULE_ID": "PSECONDARY",
        "SUPPORT_APPROVED_LIST": "bob, carol",
        "SUPPORT_OVERRIDE_LIST": "dave,erin",
    }


@pytest.fixture
def make_response():
    def _make(json_data=None, status_code=200):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = json_data
        response.content = b"" if json_data is None else b"{}"
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Client Error")
        else:
            response.raise_for_status = MagicMock()
        return response

    return _make


@pytest.fixture
def mock_lambda_context():
    context = MagicMock()
    context.function_name = "test-function"
    context.memory_limit_in_mb = 128
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-function"
    context.aws_request_id = "test-request-id"
    return context
