"""In-memory instance control provider for engine and handler tests."""

from typing import Dict, List, Optional, Sequence

from aws_ec2_resize.services.base import InstanceControlProvider
from aws_ec2_resize.services.models import InstanceSnapshot


class FakeProvider(InstanceControlProvider):
    """Records every call and replays a scripted sequence of instance states.

    ``states`` are returned by successive get_instance calls; the last one
    repeats forever. ``errors`` maps a method name to the exception it raises.
    """

    def __init__(
        self,
        instance_type: str = "t2.nano",
        states: Optional[Sequence[str]] = None,
        regions: Sequence[str] = ("us-east-1", "us-west-1", "us-west-2", "eu-west-1"),
        errors: Optional[Dict[str, Exception]] = None,
        types: Optional[Dict[str, str]] = None,
    ):
        self.instance_type = instance_type
        self.states: List[str] = list(states or ["running", "stopped"])
        self.regions = set(regions)
        self.errors = errors or {}
        self.types = types or {}
        self.calls: List[tuple] = []

    @property
    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]

    def mutating_calls(self) -> List[tuple]:
        return [c for c in self.calls if c[0] in ("stop_instance", "modify_instance_type", "start_instance")]

    def _record(self, name: str, *args) -> None:
        self.calls.append((name,) + args)
        if name in self.errors:
            raise self.errors[name]

    def is_valid_region(self, region: str) -> bool:
        return region in self.regions

    def get_instance(self, instance_id: str, region: str, profile: str) -> InstanceSnapshot:
        self._record("get_instance", instance_id, region, profile)
        state = self.states.pop(0) if len(self.states) > 1 else self.states[0]
        return InstanceSnapshot(
            instance_id=instance_id,
            instance_type=self.types.get(instance_id, self.instance_type),
            state_name=state,
        )

    def stop_instance(self, instance_id: str, region: str, profile: str) -> None:
        self._record("stop_instance", instance_id, region, profile)

    def modify_instance_type(self, instance_id: str, new_type: str, region: str, profile: str) -> None:
        self._record("modify_instance_type", instance_id, new_type, region, profile)

    def start_instance(self, instance_id: str, region: str, profile: str) -> None:
        self._record("start_instance", instance_id, region, profile)
