"""
Data models for EC2 resize requests and results.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.exceptions import RequestParseError


RETURN_FORMATS = ('json', 'xml', 'yaml')
DEFAULT_RETURN_FORMAT = 'json'

STATE_STOPPED = 'stopped'

NO_DETAIL_MESSAGE = "No server resize detail is found from the incoming request."


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class ResizeDetail(BaseModel):
    """One unit of work: a single instance, its target type and stop/start policy."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    environment: Optional[str] = Field(default=None, alias="Environment")
    region: Optional[str] = Field(default=None, alias="Region")
    instance_id: Optional[str] = Field(default=None, alias="InstanceId")
    new_instance_type: Optional[str] = Field(default=None, alias="NewInstanceType")
    stop_running_instance: bool = Field(default=False, alias="StopRunningInstance")
    start_stopped_instance: bool = Field(default=False, alias="StartStoppedInstance")
    return_format: Optional[str] = Field(default=None, alias="ReturnFormat")

    @field_validator('environment', 'region', 'instance_id', 'new_instance_type', 'return_format')
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        """Trim surrounding whitespace from text fields."""
        return v.strip() if isinstance(v, str) else v

    def is_empty(self) -> bool:
        """True when every field is still at its zero value."""
        return (
            _blank(self.environment)
            and _blank(self.region)
            and _blank(self.instance_id)
            and _blank(self.new_instance_type)
            and _blank(self.return_format)
            and not self.stop_running_instance
            and not self.start_stopped_instance
        )

    @property
    def target_instance_type(self) -> str:
        """Requested instance type, lower-cased for comparison with EC2 values."""
        return (self.new_instance_type or '').lower()

    @property
    def resolved_return_format(self) -> Optional[str]:
        """Normalized return format, 'json' when blank and None when unsupported."""
        if _blank(self.return_format):
            return DEFAULT_RETURN_FORMAT
        fmt = self.return_format.lower()
        return fmt if fmt in RETURN_FORMATS else None


class ResizeRequest(BaseModel):
    """Ordered batch of resize details parsed from the host payload."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    details: Tuple[ResizeDetail, ...] = Field(default=(), alias="Details")

    @property
    def return_format(self) -> str:
        """Return format of the response, taken from the first detail that names a valid one."""
        for detail in self.details:
            if not _blank(detail.return_format) and detail.resolved_return_format:
                return detail.resolved_return_format
        return DEFAULT_RETURN_FORMAT

    @classmethod
    def parse(cls, parameters: Any) -> "ResizeRequest":
        """Parse host parameters into a request.

        Accepts JSON or YAML text, or decoded objects. The payload may be a
        single detail mapping, a list of detail mappings, or a mapping with a
        ``Details`` list.

        Raises:
            RequestParseError: If the payload cannot be parsed or holds no details.
        """
        data = parameters
        if isinstance(parameters, (str, bytes)):
            try:
                data = yaml.safe_load(parameters)
            except yaml.YAMLError as e:
                raise RequestParseError(f"Unable to deserialize the request: {e}", details=str(e))

        if data is None:
            raise RequestParseError(NO_DETAIL_MESSAGE)

        if isinstance(data, dict):
            for key in ('Details', 'details'):
                if key in data:
                    data = data[key]
                    break
            else:
                data = [data]

        if not isinstance(data, list):
            raise RequestParseError("The request must be a resize detail or a list of resize details.")
        if not data:
            raise RequestParseError(NO_DETAIL_MESSAGE)

        try:
            return cls(details=tuple(ResizeDetail.model_validate(item) for item in data))
        except ValueError as e:
            raise RequestParseError(f"Unable to deserialize the request: {e}", details=str(e))


class ResizeResult(BaseModel):
    """Outcome of processing one resize detail."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    exit_code: int = Field(alias="ExitCode")
    exit_summary: str = Field(alias="ExitSummary")
    environment: Optional[str] = Field(default=None, alias="Environment")
    instance_id: Optional[str] = Field(default=None, alias="InstanceId")
    new_instance_type: Optional[str] = Field(default=None, alias="NewInstanceType")
    region: Optional[str] = Field(default=None, alias="Region")

    @classmethod
    def for_detail(cls, detail: ResizeDetail, exit_code: int, exit_summary: str) -> "ResizeResult":
        return cls(
            exit_code=exit_code,
            exit_summary=exit_summary,
            environment=detail.environment,
            instance_id=detail.instance_id,
            new_instance_type=detail.new_instance_type,
            region=detail.region,
        )

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class ResizeResponse(BaseModel):
    """Aggregate result returned to the host."""

    model_config = ConfigDict(populate_by_name=True)

    results: List[ResizeResult] = Field(default_factory=list, alias="Results")
    summary: str = Field(default="", alias="Summary")


@dataclass(frozen=True)
class ResolvedTarget:
    """Instance coordinates with the environment resolved to a credential profile."""
    instance_id: str
    region: str
    profile_name: str


@dataclass(frozen=True)
class InstanceSnapshot:
    """Point-in-time read of an instance's type and power state."""
    instance_id: str
    instance_type: str
    state_name: str

    @property
    def is_stopped(self) -> bool:
        return self.state_name == STATE_STOPPED


@dataclass
class ValidationOutcome:
    """Result of validating one resize detail."""
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        return " ".join(self.errors)
