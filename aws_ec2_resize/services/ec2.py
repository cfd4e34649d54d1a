"""
EC2 implementation of the instance control provider.
"""
import logging
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError, ProfileNotFound

from .base import InstanceControlProvider
from .models import InstanceSnapshot
from ..auth.profiles import ProfileSessionFactory
from ..core.exceptions import (
    CredentialsMissingError,
    InstanceNotFoundError,
    ProviderError,
    RegionInvalidError,
)


logger = logging.getLogger(__name__)

SessionFactory = Callable[[Optional[str], str], boto3.Session]

PARTITIONS = ('aws', 'aws-cn', 'aws-us-gov')

INSTANCE_NOT_FOUND_CODES = ('InvalidInstanceID.NotFound', 'InvalidInstanceID.Malformed')


class EC2InstanceProvider(InstanceControlProvider):
    """Instance control provider backed by the EC2 API through boto3."""

    def __init__(self, session_factory: Optional[SessionFactory] = None):
        """Initialize the provider.

        Args:
            session_factory: Callable returning a boto3 session for a
                             (profile, region) pair. Defaults to a
                             ProfileSessionFactory using the standard
                             credential locations.
        """
        self.session_factory = session_factory or ProfileSessionFactory()
        self._clients: Dict[Tuple[Optional[str], str], object] = {}
        self._regions: Optional[FrozenSet[str]] = None

    @property
    def known_regions(self) -> FrozenSet[str]:
        """EC2 regions from botocore's bundled endpoint data."""
        if self._regions is None:
            session = boto3.Session()
            regions = set()
            for partition in PARTITIONS:
                regions.update(session.get_available_regions('ec2', partition_name=partition))
            self._regions = frozenset(regions)
        return self._regions

    def is_valid_region(self, region: str) -> bool:
        return bool(region) and bool(region.strip()) and region in self.known_regions

    def client(self, region: str, profile: Optional[str]):
        """Get or create an EC2 client for a region and profile.

        Raises:
            RegionInvalidError: If the region is not a known endpoint
            CredentialsMissingError: If the profile has no usable credentials
        """
        if not self.is_valid_region(region):
            raise RegionInvalidError("AWS region endpoint is not valid.")

        cache_key = (profile, region)
        if cache_key not in self._clients:
            session = self.session_factory(profile, region)
            self._clients[cache_key] = session.client('ec2', region_name=region)
        return self._clients[cache_key]

    def get_instance(self, instance_id: str, region: str, profile: str) -> InstanceSnapshot:
        self._require_instance_id(instance_id)
        ec2 = self.client(region, profile)

        instances: List[dict] = []
        try:
            paginator = ec2.get_paginator('describe_instances')
            for page in paginator.paginate(InstanceIds=[instance_id]):
                for reservation in page['Reservations']:
                    instances.extend(
                        i for i in reservation['Instances'] if i['InstanceId'] == instance_id
                    )
        except Exception as e:
            self._handle_aws_error(e, 'describing', instance_id)

        if len(instances) != 1:
            raise InstanceNotFoundError(
                f"Error finding the specified instance {instance_id}."
            )

        instance = instances[0]
        return InstanceSnapshot(
            instance_id=instance_id,
            instance_type=instance['InstanceType'],
            state_name=instance['State']['Name'],
        )

    def stop_instance(self, instance_id: str, region: str, profile: str) -> None:
        self._require_instance_id(instance_id)
        ec2 = self.client(region, profile)
        try:
            ec2.stop_instances(InstanceIds=[instance_id])
        except Exception as e:
            self._handle_aws_error(e, 'stopping', instance_id)
        logger.info(f"Requested stop of EC2 instance {instance_id} in {region}")

    def modify_instance_type(self, instance_id: str, new_type: str, region: str, profile: str) -> None:
        self._require_instance_id(instance_id)
        ec2 = self.client(region, profile)
        try:
            ec2.modify_instance_attribute(
                InstanceId=instance_id,
                InstanceType={'Value': new_type},
            )
        except Exception as e:
            self._handle_aws_error(e, 'modifying', instance_id)
        logger.info(f"Changed instance type of EC2 instance {instance_id} to {new_type}")

    def start_instance(self, instance_id: str, region: str, profile: str) -> None:
        self._require_instance_id(instance_id)
        ec2 = self.client(region, profile)
        try:
            ec2.start_instances(InstanceIds=[instance_id])
        except Exception as e:
            self._handle_aws_error(e, 'starting', instance_id)
        logger.info(f"Requested start of EC2 instance {instance_id} in {region}")

    @staticmethod
    def _require_instance_id(instance_id: str) -> None:
        if not instance_id or not instance_id.strip():
            raise InstanceNotFoundError("Instance id is not specified.")

    def _handle_aws_error(self, error: Exception, action: str, instance_id: str) -> None:
        """Convert boto errors into provider errors.

        Raises:
            InstanceNotFoundError: For unknown or malformed instance ids
            CredentialsMissingError: For missing credentials or profiles
            ProviderError: For every other failure
        """
        if isinstance(error, ClientError):
            code = error.response.get('Error', {}).get('Code', 'Unknown')
            if code in INSTANCE_NOT_FOUND_CODES:
                raise InstanceNotFoundError(
                    f"Error finding the specified instance {instance_id}.", details=str(error)
                )
        if isinstance(error, (NoCredentialsError, ProfileNotFound)):
            raise CredentialsMissingError("AWS credentials are not specified", details=str(error))
        if isinstance(error, (ClientError, BotoCoreError)):
            raise ProviderError(
                f"Encountered exception while {action} EC2 instance {instance_id}: {error}",
                details=str(error),
            )
        raise error
