"""End-to-end tests for the CLI runner with fake providers and mocked handlers."""

import json
from io import StringIO
from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner
from rich.console import Console

from aws_ec2_resize import __version__
from aws_ec2_resize.cli.main import (
    EXIT_CONFIG_ERROR,
    EXIT_EXECUTION_FAILED,
    EXIT_GENERAL_ERROR,
    EXIT_SUCCESS,
    EXIT_USER_CANCELLED,
    main,
    print_progress,
)
from aws_ec2_resize.core.config import ConfigManager
from aws_ec2_resize.core.exceptions import AWSResizeError
from aws_ec2_resize.handler.progress import StatusType
from aws_ec2_resize.handler.runtime import ExecuteResult

from fakes import FakeProvider


REQUEST = {
    "Environment": "ENV1",
    "Region": "us-west-1",
    "InstanceId": "i-123",
    "NewInstanceType": "t2.micro",
    "StopRunningInstance": True,
    "StartStoppedInstance": True,
}


@pytest.fixture
def config_file(tmp_path, handler_config):
    """Saved handler configuration."""
    path = tmp_path / "config.json"
    ConfigManager(path).save_config(handler_config)
    return path


@pytest.fixture
def request_file(tmp_path):
    """Request file with the end-to-end example detail."""
    path = tmp_path / "request.json"
    path.write_text(json.dumps(REQUEST))
    return path


@pytest.fixture
def stopped_provider():
    """Provider whose instance is already stopped so no waiting happens."""
    provider = FakeProvider(states=["stopped"])
    with patch('aws_ec2_resize.handler.runtime.default_provider_factory', return_value=provider):
        yield provider


class TestCLIMainEntryPoint:
    """Test the main CLI entry point with various options and scenarios."""

    def test_resize_success(self, config_file, request_file, stopped_provider):
        runner = CliRunner()

        result = runner.invoke(main, [str(request_file), '--config', str(config_file)])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert "Result: Complete" in result.output
        assert "Execute: Processed request." in result.output
        assert stopped_provider.call_names == ["get_instance", "modify_instance_type", "start_instance"]

    def test_dry_run_does_not_mutate(self, config_file, request_file, stopped_provider):
        runner = CliRunner()

        result = runner.invoke(main, [str(request_file), '--config', str(config_file), '--dry-run'])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert "Dry run execution is completed." in result.output
        assert stopped_provider.mutating_calls() == []

    def test_item_failure_still_exits_success(self, config_file, tmp_path, stopped_provider):
        request_path = tmp_path / "bad-type.json"
        request_path.write_text(json.dumps(dict(REQUEST, NewInstanceType="t9.huge")))
        runner = CliRunner()

        result = runner.invoke(main, [str(request_path), '--config', str(config_file)])

        assert result.exit_code == EXIT_SUCCESS
        assert "EC2 instance type is not valid." in result.output
        assert stopped_provider.calls == []

    def test_empty_request_exits_execution_failed(self, config_file, tmp_path, stopped_provider):
        request_path = tmp_path / "empty.json"
        request_path.write_text("[]")
        runner = CliRunner()

        result = runner.invoke(main, [str(request_path), '--config', str(config_file)])

        assert result.exit_code == EXIT_EXECUTION_FAILED
        assert "Result: Failed" in result.output

    def test_yaml_request_file(self, config_file, tmp_path, stopped_provider):
        request_path = tmp_path / "request.yaml"
        request_path.write_text(
            "Details:\n"
            "  - Environment: ENV1\n"
            "    Region: us-west-1\n"
            "    InstanceId: i-777\n"
            "    NewInstanceType: t2.small\n"
            "    ReturnFormat: yaml\n"
        )
        runner = CliRunner()

        result = runner.invoke(main, [str(request_path), '--config', str(config_file)])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert "ExitCode: 0" in result.output
        assert ("modify_instance_type", "i-777", "t2.small", "us-west-1", "AWSPROFILE1") in stopped_provider.calls

    def test_missing_config_exits_config_error(self, tmp_path, request_file):
        runner = CliRunner()

        result = runner.invoke(main, [str(request_file), '--config', str(tmp_path / "nope.json")])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "Configuration error" in result.output

    def test_invalid_config_exits_config_error(self, tmp_path, request_file):
        config_path = tmp_path / "config.json"
        config_path.write_text('{"MaxWorkers": 0}')
        runner = CliRunner()

        result = runner.invoke(main, [str(request_file), '--config', str(config_path)])

        assert result.exit_code == EXIT_CONFIG_ERROR

    def test_missing_request_file_is_usage_error(self, config_file, tmp_path):
        runner = CliRunner()

        result = runner.invoke(main, [str(tmp_path / "missing.json"), '--config', str(config_file)])

        assert result.exit_code == 2
        assert "does not exist" in result.output

    def test_workers_option_overrides_config(self, config_file, request_file):
        runner = CliRunner()

        with patch('aws_ec2_resize.cli.main.Ec2ResizeHandler') as MockHandler:
            mock_handler = Mock()
            mock_handler.execute.return_value = ExecuteResult(status=StatusType.COMPLETE, exit_data="{}")
            MockHandler.return_value.initialize.return_value = mock_handler

            result = runner.invoke(main, [str(request_file), '--config', str(config_file), '--workers', '4'])

        assert result.exit_code == EXIT_SUCCESS, result.output
        config = MockHandler.return_value.initialize.call_args[0][0]
        assert config.max_workers == 4
        start_info = mock_handler.execute.call_args[0][0]
        assert json.loads(start_info.parameters) == REQUEST
        assert start_info.is_dry_run is False

    @pytest.mark.parametrize("error, expected_code", [
        (KeyboardInterrupt(), EXIT_USER_CANCELLED),
        (AWSResizeError("provider exploded"), EXIT_GENERAL_ERROR),
        (RuntimeError("boom"), EXIT_GENERAL_ERROR),
    ])
    def test_exceptions_map_to_exit_codes(self, config_file, request_file, error, expected_code):
        runner = CliRunner()

        with patch('aws_ec2_resize.cli.main.Ec2ResizeHandler') as MockHandler:
            MockHandler.return_value.initialize.return_value.execute.side_effect = error

            result = runner.invoke(main, [str(request_file), '--config', str(config_file)])

        assert result.exit_code == expected_code

    def test_version(self):
        runner = CliRunner()

        result = runner.invoke(main, ['--version'])

        assert result.exit_code == EXIT_SUCCESS
        assert __version__ in result.output

    def test_missing_request_file_argument_is_usage_error(self, config_file):
        runner = CliRunner()

        result = runner.invoke(main, ['--config', str(config_file)])

        assert result.exit_code == 2
        assert "REQUEST_FILE" in result.output


class TestSampleConfiguration:
    """--init writes the sample configuration through ConfigManager."""

    def test_init_writes_loadable_sample_config(self, tmp_path):
        config_path = tmp_path / "nested" / "config.json"
        runner = CliRunner()

        result = runner.invoke(main, ['--init', '--config', str(config_path)])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert "Sample configuration written" in result.output
        config = ConfigManager(config_path).load_config()
        assert config.resolve_profile("ENV1") == "AWSPROFILE1"
        assert config.resolve_profile("ENV2") == "AWSPROFILE2"
        saved = json.loads(config_path.read_text())
        assert saved["AwsEnvironmentProfile"] == {"ENV1": "AWSPROFILE1", "ENV2": "AWSPROFILE2"}

    def test_init_refuses_to_overwrite(self, config_file):
        before = config_file.read_text()
        runner = CliRunner()

        result = runner.invoke(main, ['--init', '--config', str(config_file)])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "already exists" in result.output
        assert config_file.read_text() == before


class TestPrintProgress:
    """Progress lines keep bracketed text from messages intact."""

    def test_bracketed_message_text_is_printed_verbatim(self):
        buffer = StringIO()

        with patch('aws_ec2_resize.cli.main.console', Console(file=buffer, width=200)):
            print_progress(
                "Execute",
                "bad input [type=string_type, input_value=123] end",
                StatusType.FAILED,
                3,
            )

        output = buffer.getvalue()
        assert "[type=string_type, input_value=123]" in output
        assert "Failed" in output
        assert "Execute: bad input" in output

    def test_bracketed_context_is_printed_verbatim(self):
        buffer = StringIO()

        with patch('aws_ec2_resize.cli.main.console', Console(file=buffer, width=200)):
            print_progress("[i-123]", "Stopping the EC2 instance...", StatusType.RUNNING, 1)

        assert "[i-123]: Stopping the EC2 instance..." in buffer.getvalue()
