"""
Batch coordinator for resizing several instances in one request.
"""
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional, Sequence
import logging

from .base import InstanceControlProvider
from .engine import ResizeEngine
from .models import ResizeDetail, ResizeResponse, ResizeResult, ResolvedTarget
from .validator import validate
from ..core.config import HandlerConfig
from ..core.exceptions import AWSResizeError, ConfigurationError


logger = logging.getLogger(__name__)

EXIT_CODE_SUCCESS = 0
EXIT_CODE_FAILURE = -1

MSG_PROCESSED = "Processed child request."
MSG_DRY_RUN_COMPLETE = "Dry run execution is completed."
MSG_COMPLETE = "Execution is completed."


class BatchCoordinator:
    """Validates and resizes each detail of a batch independently.

    A failure in one detail never stops the others; every detail yields
    exactly one ResizeResult, in input order.
    """

    def __init__(
        self,
        provider: InstanceControlProvider,
        engine: ResizeEngine,
        config: HandlerConfig,
        reporter=None,
        max_workers: Optional[int] = None,
    ):
        """Initialize the coordinator.

        Args:
            provider: Provider used for validation checks
            engine: Resize engine for valid details
            config: Handler configuration with the environment profiles
            reporter: Optional ProgressReporter for per-instance updates
            max_workers: Details processed concurrently; 1 runs them in order.
                         Defaults to the configured MaxWorkers.
        """
        self.provider = provider
        self.engine = engine
        self.config = config
        self.reporter = reporter
        self.max_workers = max(1, max_workers if max_workers is not None else config.max_workers)

    def run(self, details: Sequence[ResizeDetail], dry_run: bool = False) -> ResizeResponse:
        """Process every detail and assemble the response.

        Args:
            details: Resize details in request order
            dry_run: Validate and inspect only

        Returns:
            ResizeResponse with one result per detail
        """
        logger.info(
            f"Processing {len(details)} resize request(s)" + (" in dry run mode" if dry_run else "")
        )

        if self.max_workers == 1 or len(details) <= 1:
            results = [self.process_detail(detail, dry_run) for detail in details]
        else:
            results = self._run_parallel(details, dry_run)

        summary = self.get_summary(results)
        logger.info(f"Resize summary: {summary['succeeded']}/{summary['total']} succeeded")
        if summary['failed'] > 0:
            logger.warning(f"{summary['failed']} resize request(s) failed:")
            for failed in summary['failed_instances']:
                logger.warning(f"  - {failed['instance_id']}: {failed['exit_summary']}")

        return ResizeResponse(
            results=results,
            summary=MSG_DRY_RUN_COMPLETE if dry_run else MSG_COMPLETE,
        )

    def _run_parallel(self, details: Sequence[ResizeDetail], dry_run: bool) -> List[ResizeResult]:
        results: List[Optional[ResizeResult]] = [None] * len(details)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index = {
                executor.submit(self.process_detail, detail, dry_run): index
                for index, detail in enumerate(details)
            }

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                try:
                    results[index] = future.result()
                except Exception as e:
                    logger.exception(f"Unexpected error resizing {details[index].instance_id}")
                    results[index] = ResizeResult.for_detail(
                        details[index], EXIT_CODE_FAILURE, f"Unexpected error during resize: {e}"
                    )

        return results

    def process_detail(self, detail: ResizeDetail, dry_run: bool = False) -> ResizeResult:
        """Validate and resize a single detail, converting any failure to a result."""
        progress = self._scoped_reporter(detail)

        try:
            if progress is not None:
                progress.update("Verifying request parameters...")
            outcome = validate(detail, self.config.aws_environment_profile, self.provider)
            if not outcome.ok:
                for error in outcome.errors:
                    if progress is not None:
                        progress.update(error)
                return ResizeResult.for_detail(detail, EXIT_CODE_FAILURE, outcome.message)

            if progress is not None:
                progress.update("Executing request" + (" in dry run mode..." if dry_run else "..."))
            target = self.resolve_target(detail)
            self.engine.resize(detail, target, dry_run=dry_run, reporter=progress)

        except AWSResizeError as e:
            logger.warning(f"Resize of {detail.instance_id} failed: {e.message}")
            if progress is not None:
                progress.update(e.message)
            return ResizeResult.for_detail(detail, EXIT_CODE_FAILURE, e.message)
        except Exception as e:
            logger.exception(f"Unexpected error resizing {detail.instance_id}")
            if progress is not None:
                progress.update(str(e))
            return ResizeResult.for_detail(detail, EXIT_CODE_FAILURE, str(e))

        if progress is not None:
            progress.update(MSG_PROCESSED)
        return ResizeResult.for_detail(detail, EXIT_CODE_SUCCESS, MSG_PROCESSED)

    def resolve_target(self, detail: ResizeDetail) -> ResolvedTarget:
        """Resolve a detail's environment to its credential profile.

        Raises:
            ConfigurationError: If the environment has no profile
        """
        profile = self.config.resolve_profile(detail.environment)
        if profile is None:
            raise ConfigurationError("Specified environment is not found.")
        return ResolvedTarget(
            instance_id=detail.instance_id,
            region=detail.region,
            profile_name=profile,
        )

    def _scoped_reporter(self, detail: ResizeDetail):
        if self.reporter is None:
            return None
        if self.max_workers == 1:
            return self.reporter.scoped(self.reporter.context)
        return self.reporter.scoped(detail.instance_id or self.reporter.context)

    @staticmethod
    def get_summary(results: Sequence[ResizeResult]) -> Dict[str, Any]:
        """Count successes and failures of a batch."""
        failed = [r for r in results if not r.succeeded]
        return {
            'total': len(results),
            'succeeded': len(results) - len(failed),
            'failed': len(failed),
            'failed_instances': [
                {
                    'instance_id': r.instance_id,
                    'region': r.region,
                    'exit_summary': r.exit_summary,
                }
                for r in failed
            ],
        }
