from unittest.mock import MagicMock, patch

import pytest

from errors import ConfigurationError, SyncError
from handler import lambda_handler, main, run_sync
from settings import REQUIRED_VARIABLES
from sync import SyncResult


@pytest.fixture
def sample_result():
    return SyncResult(
        primary_now="alice",
        secondary_now="bob",
        primary_later="alice",
        secondary_later="frank",
        support=["bob"],
        oncall_changed=True,
    )


@pytest.fixture
def configured_env(sync_env, monkeypatch):
    for name, value in sync_env.items():
        monkeypatch.setenv(name, value)
    return sync_env


@pytest.fixture
def empty_env(monkeypatch):
    for name in [*REQUIRED_VARIABLES, "PAGERDUTY_APIKEY", "OPSGENIE_APIKEY", "ONCALL_PROVIDER"]:
        monkeypatch.delenv(name, raising=False)


class TestRunSync:
    @patch("handler.build_container")
    def test_builds_container_from_validated_settings(self, mock_build, sync_env, sample_result):
        mock_build.return_value.roster_sync.return_value.run.return_value = sample_result

        result = run_sync(sync_env)

        assert result == sample_result
        settings = mock_build.call_args[0][0]
        assert settings.oncall_group_id == "oncall-group"

    @patch("handler.build_container")
    def test_configuration_error_before_any_client_is_built(self, mock_build):
        with pytest.raises(ConfigurationError):
            run_sync({})

        mock_build.assert_not_called()


class TestLambdaHandler:
    @patch("handler.build_container")
    def test_successful_run(self, mock_build, configured_env, sample_result, mock_lambda_context):
        mock_build.return_value.roster_sync.return_value.run.return_value = sample_result

        response = lambda_handler({"source": "aws.events"}, mock_lambda_context)

        assert response["oncall_changed"] is True
        assert response["support"] == ["bob"]

    @patch("handler.build_container")
    def test_failure_is_raised(self, mock_build, configured_env, mock_lambda_context):
        mock_build.return_value.roster_sync.return_value.run.side_effect = SyncError("Unable to set members")

        with pytest.raises(SyncError):
            lambda_handler({"source": "aws.events"}, mock_lambda_context)

    def test_missing_configuration_is_raised(self, empty_env, mock_lambda_context):
        with pytest.raises(ConfigurationError):
            lambda_handler({"source": "aws.events"}, mock_lambda_context)


class TestMain:
    @patch("handler.load_dotenv")
    @patch("handler.build_container")
    def test_exit_code_zero_on_success(self, mock_build, mock_load_dotenv, configured_env, sample_result):
        mock_build.return_value.roster_sync.return_value.run.return_value = sample_result

        assert main() == 0
        mock_load_dotenv.assert_called_once()

    @patch("handler.load_dotenv")
    @patch("handler.build_container")
    def test_exit_code_one_on_sync_error(self, mock_build, mock_load_dotenv, configured_env):
        mock_build.return_value.roster_sync.return_value.run.side_effect = SyncError("boom")

        assert main() == 1

    @patch("handler.load_dotenv", MagicMock())
    def test_exit_code_one_on_missing_configuration(self, empty_env):
        assert main() == 1
