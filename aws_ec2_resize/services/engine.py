"""
Resize engine driving a single instance through stop, modify and start.
"""
import logging
import time
from typing import Callable

from .base import InstanceControlProvider
from .models import InstanceSnapshot, ResizeDetail, ResolvedTarget
from .polling import wait_until
from ..core.exceptions import (
    AlreadyCorrectTypeError,
    StopTimeoutError,
    WaitTimeoutError,
)


logger = logging.getLogger(__name__)

DEFAULT_STOP_POLL_INTERVAL = 5.0
DEFAULT_STOP_TIMEOUT = 300.0


class ResizeEngine:
    """Resizes one EC2 instance at a time.

    The sequence is: inspect the instance, fail if it already has the
    requested type, stop and wait for 'stopped', change the type, and
    optionally start it again. In dry run mode only the inspection runs.
    """

    def __init__(
        self,
        provider: InstanceControlProvider,
        stop_poll_interval: float = DEFAULT_STOP_POLL_INTERVAL,
        stop_timeout: float = DEFAULT_STOP_TIMEOUT,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the engine.

        Args:
            provider: Instance control provider for all remote calls
            stop_poll_interval: Seconds between state checks while stopping
            stop_timeout: Seconds to wait for 'stopped' before aborting
            sleep: Sleep function used by the stop wait
        """
        self.provider = provider
        self.stop_poll_interval = stop_poll_interval
        self.stop_timeout = stop_timeout
        self.sleep = sleep

    def resize(self, detail: ResizeDetail, target: ResolvedTarget, dry_run: bool = False, reporter=None) -> None:
        """Resize the instance described by ``detail``.

        Args:
            detail: Validated resize detail
            target: Instance coordinates with the resolved credential profile
            dry_run: Inspect only, without stopping or modifying the instance
            reporter: Optional object with an ``update(message)`` method

        Raises:
            AlreadyCorrectTypeError: If the instance already has the requested type
            StopTimeoutError: If the instance does not stop within the budget
            ProviderError: If any provider call fails
        """
        progress = reporter.update if reporter is not None else (lambda message: None)
        new_type = detail.target_instance_type

        progress("Getting EC2 instance details...")
        snapshot = self._get_snapshot(target)

        if snapshot.instance_type == new_type:
            raise AlreadyCorrectTypeError(
                f"The instance is already of type '{detail.new_instance_type}'."
            )

        if dry_run:
            logger.info(
                f"[DRY RUN] Would resize {target.instance_id} from {snapshot.instance_type} to {new_type}"
            )
            return

        if not snapshot.is_stopped:
            progress("Stopping the EC2 instance...")
            self.provider.stop_instance(target.instance_id, target.region, target.profile_name)
            self._wait_for_stopped(target, progress)

        progress("Changing the EC2's instance type...")
        self.provider.modify_instance_type(target.instance_id, new_type, target.region, target.profile_name)
        logger.info(f"Resized {target.instance_id} from {snapshot.instance_type} to {new_type}")

        if detail.start_stopped_instance:
            progress("Starting the EC2 instance...")
            self.provider.start_instance(target.instance_id, target.region, target.profile_name)

    def _get_snapshot(self, target: ResolvedTarget) -> InstanceSnapshot:
        return self.provider.get_instance(target.instance_id, target.region, target.profile_name)

    def _wait_for_stopped(self, target: ResolvedTarget, progress: Callable[[str], None]) -> None:
        def is_stopped() -> bool:
            return self._get_snapshot(target).is_stopped

        try:
            attempts = wait_until(
                is_stopped,
                interval=self.stop_poll_interval,
                timeout=self.stop_timeout,
                on_attempt=lambda attempt: progress("Waiting for EC2 to be stopped..."),
                sleep=self.sleep,
            )
        except WaitTimeoutError:
            raise StopTimeoutError(
                f"Failed to stop the EC2 instance within {self._budget_label()}. "
                "Aborting the resizing operation."
            )
        logger.debug(f"Instance {target.instance_id} stopped after {attempts} checks")

    def _budget_label(self) -> str:
        seconds = self.stop_timeout
        if seconds >= 60 and seconds % 60 == 0:
            minutes = int(seconds // 60)
            return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
        return f"{seconds:g} seconds"
