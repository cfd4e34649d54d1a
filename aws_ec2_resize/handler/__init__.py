"""Host automation engine boundary."""

from .progress import FINAL_SEQUENCE, ProgressRecord, ProgressReporter, StatusType
from .runtime import Ec2ResizeHandler, ExecuteResult, HandlerStartInfo

__all__ = [
    'FINAL_SEQUENCE',
    'ProgressRecord',
    'ProgressReporter',
    'StatusType',
    'Ec2ResizeHandler',
    'ExecuteResult',
    'HandlerStartInfo',
]
