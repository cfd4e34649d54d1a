"""
Validation of resize details before any remote call is made.
"""
import logging
from typing import Mapping

from .base import InstanceControlProvider
from .models import ResizeDetail, ValidationOutcome


logger = logging.getLogger(__name__)

ERR_EMPTY_REQUEST = "No parameter is found in the request."
ERR_ENVIRONMENT = "Environment can not be found."
ERR_INSTANCE_ID = "EC2 instance id is not specified."
ERR_REGION = "AWS region is not valid."
ERR_INSTANCE_TYPE = "EC2 instance type is not valid."
ERR_RETURN_FORMAT = "Valid return formats are json, xml or yaml."


def validate(
    detail: ResizeDetail,
    environment_map: Mapping[str, str],
    provider: InstanceControlProvider,
) -> ValidationOutcome:
    """Check a resize detail.

    All checks run and every failure is reported, except for an empty
    detail which fails on its own.

    Args:
        detail: Resize detail to check
        environment_map: Environment name to credential profile mapping
        provider: Provider used for the region and instance type checks

    Returns:
        ValidationOutcome listing the errors in check order
    """
    outcome = ValidationOutcome()

    if detail.is_empty():
        outcome.errors.append(ERR_EMPTY_REQUEST)
        return outcome

    environment = detail.environment
    if not environment or environment not in environment_map:
        outcome.errors.append(ERR_ENVIRONMENT)

    if not detail.instance_id:
        outcome.errors.append(ERR_INSTANCE_ID)

    if not detail.region or not provider.is_valid_region(detail.region):
        outcome.errors.append(ERR_REGION)

    if not provider.is_valid_instance_type(detail.target_instance_type):
        outcome.errors.append(ERR_INSTANCE_TYPE)

    if detail.resolved_return_format is None:
        outcome.errors.append(ERR_RETURN_FORMAT)

    if not outcome.ok:
        logger.debug(f"Validation failed for instance {detail.instance_id}: {outcome.message}")
    return outcome
