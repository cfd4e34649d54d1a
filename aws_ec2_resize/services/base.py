"""
Instance control provider interface used by the resize engine.
"""
from abc import ABC, abstractmethod
from typing import FrozenSet

from .models import InstanceSnapshot


VALID_INSTANCE_TYPES: FrozenSet[str] = frozenset([
    "t2.nano", "t2.micro", "t2.small", "t2.medium", "t2.large", "t2.xlarge", "t2.2xlarge",
    "m5.large", "m5.xlarge", "m5.2xlarge", "m5.4xlarge", "m5.12xlarge", "m5.24xlarge",
    "m5d.large", "m5d.xlarge", "m5d.2xlarge", "m5d.4xlarge", "m5d.12xlarge", "m5d.24xlarge",
    "m4.large", "m4.xlarge", "m4.2xlarge", "m4.4xlarge", "m4.10xlarge", "m4.16xlarge",
])


class InstanceControlProvider(ABC):
    """Abstract base class for reading and changing EC2 instance state."""

    def is_valid_instance_type(self, instance_type: str) -> bool:
        """Check an instance type against the supported allow-list.

        The comparison is exact; callers lower-case user input first.
        """
        return instance_type in VALID_INSTANCE_TYPES

    @abstractmethod
    def is_valid_region(self, region: str) -> bool:
        """Check whether a region name is a known EC2 region."""
        pass

    @abstractmethod
    def get_instance(self, instance_id: str, region: str, profile: str) -> InstanceSnapshot:
        """Read the current type and state of an instance.

        Raises:
            InstanceNotFoundError: If exactly one matching instance cannot be found
            CredentialsMissingError: If the profile has no usable credentials
            RegionInvalidError: If the region is not a known endpoint
            ProviderError: If the API call fails
        """
        pass

    @abstractmethod
    def stop_instance(self, instance_id: str, region: str, profile: str) -> None:
        """Request that an instance stops.

        Raises:
            ProviderError: If the API call fails
        """
        pass

    @abstractmethod
    def modify_instance_type(self, instance_id: str, new_type: str, region: str, profile: str) -> None:
        """Change the instance type of a stopped instance.

        Raises:
            ProviderError: If the API call fails
        """
        pass

    @abstractmethod
    def start_instance(self, instance_id: str, region: str, profile: str) -> None:
        """Request that an instance starts.

        Raises:
            ProviderError: If the API call fails
        """
        pass
