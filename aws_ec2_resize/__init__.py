"""
AWS EC2 Resize - resize EC2 instances from a host automation engine.

A handler that stops an instance, changes its instance type and optionally
starts it again, reporting progress and one structured result per instance.
"""

__version__ = "1.0.0"

from aws_ec2_resize.core.exceptions import AWSResizeError

__all__ = ["AWSResizeError"]
