"""EC2 resize services package."""

from .base import InstanceControlProvider, VALID_INSTANCE_TYPES
from .models import (
    ResizeDetail,
    ResizeRequest,
    ResizeResult,
    ResizeResponse,
    ResolvedTarget,
    InstanceSnapshot,
    ValidationOutcome,
)
from .ec2 import EC2InstanceProvider
from .engine import ResizeEngine
from .coordinator import BatchCoordinator
from .validator import validate

__all__ = [
    'InstanceControlProvider',
    'VALID_INSTANCE_TYPES',
    'ResizeDetail',
    'ResizeRequest',
    'ResizeResult',
    'ResizeResponse',
    'ResolvedTarget',
    'InstanceSnapshot',
    'ValidationOutcome',
    'EC2InstanceProvider',
    'ResizeEngine',
    'BatchCoordinator',
    'validate',
]
