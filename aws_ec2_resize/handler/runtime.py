"""
Handler runtime exposed to the host automation engine.

The host calls ``initialize`` with the handler configuration, then
``execute`` with a HandlerStartInfo. Progress is pushed to the host
callback while the batch runs, and the final ExecuteResult carries the
serialized ResizeResponse in ``exit_data``.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

from aws_ec2_resize.auth.profiles import ProfileSessionFactory
from aws_ec2_resize.core.config import HandlerConfig
from aws_ec2_resize.core.exceptions import AWSResizeError
from aws_ec2_resize.handler.formatters import serialize
from aws_ec2_resize.handler.progress import (
    FINAL_SEQUENCE,
    ProgressCallback,
    ProgressReporter,
    StatusType,
)
from aws_ec2_resize.services.base import InstanceControlProvider
from aws_ec2_resize.services.coordinator import (
    MSG_COMPLETE,
    MSG_DRY_RUN_COMPLETE,
    BatchCoordinator,
)
from aws_ec2_resize.services.ec2 import EC2InstanceProvider
from aws_ec2_resize.services.engine import ResizeEngine
from aws_ec2_resize.services.models import (
    DEFAULT_RETURN_FORMAT,
    ResizeDetail,
    ResizeRequest,
    ResizeResponse,
)


logger = logging.getLogger(__name__)

ProviderFactory = Callable[[HandlerConfig], InstanceControlProvider]


@dataclass(frozen=True)
class HandlerStartInfo:
    """Invocation input supplied by the host."""
    parameters: Any
    is_dry_run: bool = False


@dataclass
class ExecuteResult:
    """Final result returned to the host."""
    status: StatusType = StatusType.NONE
    exit_data: Optional[str] = None
    sequence: int = FINAL_SEQUENCE


def default_provider_factory(config: HandlerConfig) -> InstanceControlProvider:
    """Build the boto3 provider for one invocation from explicit configuration."""
    return EC2InstanceProvider(ProfileSessionFactory(config.credential_file))


class Ec2ResizeHandler:
    """Resizes EC2 instances on behalf of the host automation engine."""

    def __init__(
        self,
        provider_factory: Optional[ProviderFactory] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the handler.

        Args:
            provider_factory: Builds the instance control provider for an
                              invocation. Defaults to the boto3 provider.
            sleep: Sleep function used while waiting for instances to stop
        """
        self.provider_factory = provider_factory or default_provider_factory
        self.sleep = sleep
        self.config = HandlerConfig()

    def initialize(self, values: Union[str, Dict[str, Any], HandlerConfig, None]) -> "Ec2ResizeHandler":
        """Load the handler configuration.

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        if isinstance(values, HandlerConfig):
            self.config = values
        else:
            self.config = HandlerConfig.from_values(values)
        logger.debug(f"Configured environments: {', '.join(sorted(self.config.aws_environment_profile))}")
        return self

    def execute(
        self,
        start_info: HandlerStartInfo,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ExecuteResult:
        """Run one invocation.

        Parsing failures and empty requests fail the whole invocation; every
        other failure is reported per detail in the response.

        Args:
            start_info: Host parameters and dry run flag
            on_progress: Optional host progress callback

        Returns:
            ExecuteResult with the serialized ResizeResponse
        """
        reporter = ProgressReporter(on_progress)
        result = ExecuteResult()
        response = ResizeResponse()
        return_format = DEFAULT_RETURN_FORMAT
        dry_run = start_info.is_dry_run

        try:
            reporter.update("Deserializing incoming request...", StatusType.INITIALIZING)
            request = ResizeRequest.parse(start_info.parameters)
            return_format = request.return_format

            reporter.update("Processing request...", StatusType.RUNNING)
            coordinator = self._build_coordinator(reporter)
            response = coordinator.run(request.details, dry_run=dry_run)

            reporter.update("Processed request.", StatusType.COMPLETE)

        except AWSResizeError as e:
            logger.error(f"Execution aborted: {e.message}")
            reporter.update(f"Execution has been aborted due to: {e.message}", StatusType.FAILED)
        except Exception as e:
            logger.exception("Unexpected error during execution")
            reporter.update(f"Execution has been aborted due to: {e}", StatusType.FAILED)

        response.summary = MSG_DRY_RUN_COMPLETE if dry_run else MSG_COMPLETE
        reporter.update(response.summary, final=True)

        result.status = reporter.status
        result.exit_data = serialize(response, return_format)
        return result

    def _build_coordinator(self, reporter: ProgressReporter) -> BatchCoordinator:
        provider = self.provider_factory(self.config)
        engine = ResizeEngine(
            provider,
            stop_poll_interval=self.config.stop_poll_interval,
            stop_timeout=self.config.stop_timeout,
            sleep=self.sleep,
        )
        return BatchCoordinator(
            provider,
            engine,
            self.config,
            reporter=reporter,
        )

    @staticmethod
    def get_config_instance() -> HandlerConfig:
        """Sample configuration shown to host operators."""
        return HandlerConfig(
            aws_environment_profile={
                "ENV1": "AWSPROFILE1",
                "ENV2": "AWSPROFILE2",
            }
        )

    @staticmethod
    def get_parameters_instance() -> ResizeDetail:
        """Sample parameters shown to host operators."""
        return ResizeDetail(
            environment="ENV1",
            region="us-west-1",
            instance_id="i-xxxxxx",
            new_instance_type="t2.nano",
            stop_running_instance=True,
            start_stopped_instance=True,
        )
