"""
Pytest configuration and shared fixtures for EC2 resize handler tests.
"""

from pathlib import Path

import pytest

from aws_ec2_resize.core.config import HandlerConfig
from aws_ec2_resize.services.models import ResizeDetail

from fakes import FakeProvider


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch, tmp_path):
    """Keep tests away from real AWS credentials and config files."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "aws-config-missing"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "aws-credentials-missing"))
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def environment_map():
    """Environment to credential profile mapping used across tests."""
    return {"ENV1": "AWSPROFILE1", "ENV2": "AWSPROFILE2"}


@pytest.fixture
def handler_config(environment_map):
    """Handler configuration with fast polling for tests."""
    return HandlerConfig(
        aws_environment_profile=environment_map,
        stop_poll_interval=5,
        stop_timeout=300,
    )


@pytest.fixture
def fake_provider():
    """Provider whose instance is a running t2.nano that stops on the second check."""
    return FakeProvider(instance_type="t2.nano", states=["running", "stopping", "stopped"])


@pytest.fixture
def sample_detail():
    """The end-to-end example resize detail."""
    return ResizeDetail(
        environment="ENV1",
        region="us-west-1",
        instance_id="i-123",
        new_instance_type="t2.micro",
        stop_running_instance=True,
        start_stopped_instance=True,
    )


@pytest.fixture
def no_sleep():
    """Sleep replacement that records requested delays instead of sleeping."""
    delays = []

    def sleep(seconds):
        delays.append(seconds)

    sleep.delays = delays
    return sleep


@pytest.fixture
def temp_config_path(tmp_path) -> Path:
    """Path for a handler configuration file in a temporary directory."""
    return tmp_path / "config" / "config.json"
