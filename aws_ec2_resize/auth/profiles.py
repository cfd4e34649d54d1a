"""Credential profile resolution for boto3 sessions."""

import logging
import threading
from typing import Dict, Optional, Tuple

import boto3
import botocore.session
from botocore.exceptions import BotoCoreError, NoCredentialsError, ProfileNotFound

from aws_ec2_resize.core.exceptions import CredentialsMissingError


logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "default"


class ProfileSessionFactory:
    """Builds boto3 sessions from named credential profiles.

    Sessions are cached per (profile, region) for the lifetime of the factory,
    which the handler creates once per invocation.
    """

    def __init__(self, credential_file: Optional[str] = None):
        """Initialize the session factory.

        Args:
            credential_file: Optional shared credentials file. If None, the
                             standard AWS credential chain locations are used.
        """
        self.credential_file = credential_file
        self._sessions: Dict[Tuple[str, str], boto3.Session] = {}
        self._lock = threading.Lock()

    def __call__(self, profile_name: Optional[str], region: str) -> boto3.Session:
        return self.get_session(profile_name, region)

    def get_session(self, profile_name: Optional[str], region: str) -> boto3.Session:
        """Get an authenticated session for a profile and region.

        Args:
            profile_name: Credential profile name. Blank means 'default'.
            region: AWS region for the session.

        Returns:
            boto3 Session with resolvable credentials.

        Raises:
            CredentialsMissingError: If the profile does not exist or has no credentials.
        """
        if not profile_name or not profile_name.strip():
            profile_name = DEFAULT_PROFILE

        cache_key = (profile_name, region)
        with self._lock:
            if cache_key in self._sessions:
                return self._sessions[cache_key]

            session = self._create_session(profile_name, region)
            self._sessions[cache_key] = session
            return session

    def _create_session(self, profile_name: str, region: str) -> boto3.Session:
        core_session = botocore.session.Session()
        if self.credential_file:
            core_session.set_config_variable('credentials_file', self.credential_file)

        try:
            session = boto3.Session(
                botocore_session=core_session,
                profile_name=profile_name,
                region_name=region,
            )
            credentials = session.get_credentials()
        except ProfileNotFound:
            raise CredentialsMissingError(
                f"AWS credential profile '{profile_name}' could not be found."
            )
        except NoCredentialsError:
            credentials = None
        except BotoCoreError as e:
            raise CredentialsMissingError(
                f"Failed to load AWS credentials for profile '{profile_name}': {e}",
                details=str(e),
            )

        if credentials is None:
            raise CredentialsMissingError("AWS credentials are not specified")

        logger.debug(f"Created AWS session for profile {profile_name} in {region}")
        return session
