"""Resource types of the migration.vibe.io/v1alpha1 API group."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def _check_int32(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueError(f"{name} out of 32-bit range: {value}")
    return value


def _put(out: dict, key: str, value: Any) -> None:
    """Store a value unless it is empty (the omitempty rule)."""
    if value:
        out[key] = value


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with its version."""

    group: str
    version: str

    def api_version(self) -> str:
        """Return the "group/version" string used in apiVersion fields."""
        return f"{self.group}/{self.version}" if self.group else self.version


GROUP_VERSION = GroupVersion(group="migration.vibe.io", version="v1alpha1")


class Phase(str, Enum):
    """The stage a migration is in."""

    PENDING = "Pending"
    CHECKPOINTING = "Checkpointing"
    TRANSFERRING = "Transferring"
    RESTORING = "Restoring"
    REPLAYING = "Replaying"
    FINALIZING = "Finalizing"
    COMPLETED = "Completed"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self in (Phase.COMPLETED, Phase.FAILED)


@dataclass
class Condition:
    """One observation of an aspect of a resource's state."""

    type: str = ""
    status: str = ""
    last_transition_time: str = ""
    reason: str = ""
    message: str = ""
    observed_generation: int = 0

    def to_dict(self) -> dict:
        out = {"type": self.type, "status": self.status}
        _put(out, "observedGeneration", self.observed_generation)
        out["lastTransitionTime"] = self.last_transition_time
        out["reason"] = self.reason
        out["message"] = self.message
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Condition":
        data = data or {}
        return cls(
            type=data.get("type", ""),
            status=data.get("status", ""),
            last_transition_time=data.get("lastTransitionTime", ""),
            reason=data.get("reason", ""),
            message=data.get("message", ""),
            observed_generation=data.get("observedGeneration", 0),
        )


@dataclass
class ObjectMeta:
    """Identity and bookkeeping metadata of a single object."""

    name: str = ""
    namespace: str = ""
    uid: str = ""
    resource_version: str = ""
    generation: int = 0
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "name", self.name)
        _put(out, "namespace", self.namespace)
        _put(out, "uid", self.uid)
        _put(out, "resourceVersion", self.resource_version)
        _put(out, "generation", self.generation)
        _put(out, "labels", dict(self.labels))
        _put(out, "annotations", dict(self.annotations))
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ObjectMeta":
        data = data or {}
        return cls(
            name=data.get("name", ""),
            namespace=data.get("namespace", ""),
            uid=data.get("uid", ""),
            resource_version=data.get("resourceVersion", ""),
            generation=data.get("generation", 0),
            labels=dict(data.get("labels") or {}),
            annotations=dict(data.get("annotations") or {}),
        )


@dataclass
class ListMeta:
    """Metadata of a list of objects."""

    resource_version: str = ""
    continue_token: str = ""

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "resourceVersion", self.resource_version)
        _put(out, "continue", self.continue_token)
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ListMeta":
        data = data or {}
        return cls(
            resource_version=data.get("resourceVersion", ""),
            continue_token=data.get("continue", ""),
        )


@dataclass
class MessageQueueConfig:
    """Configuration of the message broker used during replay."""

    queue_name: str = ""
    broker_url: str = ""

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "queueName", self.queue_name)
        _put(out, "brokerUrl", self.broker_url)
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "MessageQueueConfig":
        data = data or {}
        return cls(
            queue_name=data.get("queueName", ""),
            broker_url=data.get("brokerUrl", ""),
        )

    def deep_copy(self) -> "MessageQueueConfig":
        return copy.deepcopy(self)


@dataclass
class StatefulMigrationSpec:
    """Desired state of a migration."""

    source_pod: str = ""
    target_node: str = ""
    checkpoint_image_repository: str = ""
    replay_cutoff_seconds: int = 0
    message_queue_config: MessageQueueConfig = field(default_factory=MessageQueueConfig)

    def __post_init__(self) -> None:
        _check_int32("replay_cutoff_seconds", self.replay_cutoff_seconds)

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "sourcePod", self.source_pod)
        _put(out, "targetNode", self.target_node)
        _put(out, "checkpointImageRepository", self.checkpoint_image_repository)
        _put(out, "replayCutoffSeconds", self.replay_cutoff_seconds)
        out["messageQueueConfig"] = self.message_queue_config.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "StatefulMigrationSpec":
        data = data or {}
        return cls(
            source_pod=data.get("sourcePod", ""),
            target_node=data.get("targetNode", ""),
            checkpoint_image_repository=data.get("checkpointImageRepository", ""),
            replay_cutoff_seconds=data.get("replayCutoffSeconds", 0),
            message_queue_config=MessageQueueConfig.from_dict(data.get("messageQueueConfig")),
        )

    def deep_copy(self) -> "StatefulMigrationSpec":
        return copy.deepcopy(self)


@dataclass
class StatefulMigrationStatus:
    """Observed state of a migration; a phase of None means not yet started."""

    phase: Optional[Phase] = None
    source_node: str = ""
    checkpoint_id: str = ""
    target_pod: str = ""
    conditions: list[Condition] = field(default_factory=list)

    def to_dict(self) -> dict:
        out: dict = {}
        if self.phase is not None:
            out["phase"] = self.phase.value
        _put(out, "sourceNode", self.source_node)
        _put(out, "checkpointID", self.checkpoint_id)
        _put(out, "targetPod", self.target_pod)
        _put(out, "conditions", [c.to_dict() for c in self.conditions])
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "StatefulMigrationStatus":
        data = data or {}
        raw_phase = data.get("phase") or None
        return cls(
            phase=Phase(raw_phase) if raw_phase is not None else None,
            source_node=data.get("sourceNode", ""),
            checkpoint_id=data.get("checkpointID", ""),
            target_pod=data.get("targetPod", ""),
            conditions=[Condition.from_dict(c) for c in data.get("conditions") or []],
        )

    def deep_copy(self) -> "StatefulMigrationStatus":
        return copy.deepcopy(self)


@dataclass
class StatefulMigration:
    """A request to move a stateful pod to another node."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: StatefulMigrationSpec = field(default_factory=StatefulMigrationSpec)
    status: StatefulMigrationStatus = field(default_factory=StatefulMigrationStatus)
    api_version: str = GROUP_VERSION.api_version()
    kind: str = "StatefulMigration"

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "apiVersion", self.api_version)
        _put(out, "kind", self.kind)
        out["metadata"] = self.metadata.to_dict()
        out["spec"] = self.spec.to_dict()
        out["status"] = self.status.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "StatefulMigration":
        data = data or {}
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=StatefulMigrationSpec.from_dict(data.get("spec")),
            status=StatefulMigrationStatus.from_dict(data.get("status")),
            api_version=data.get("apiVersion", ""),
            kind=data.get("kind", ""),
        )

    def deep_copy(self) -> "StatefulMigration":
        return copy.deepcopy(self)


@dataclass
class StatefulMigrationList:
    """A list of migrations."""

    items: list[StatefulMigration] = field(default_factory=list)
    metadata: ListMeta = field(default_factory=ListMeta)
    api_version: str = GROUP_VERSION.api_version()
    kind: str = "StatefulMigrationList"

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "apiVersion", self.api_version)
        _put(out, "kind", self.kind)
        out["metadata"] = self.metadata.to_dict()
        out["items"] = [item.to_dict() for item in self.items]
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "StatefulMigrationList":
        data = data or {}
        return cls(
            items=[StatefulMigration.from_dict(i) for i in data.get("items") or []],
            metadata=ListMeta.from_dict(data.get("metadata")),
            api_version=data.get("apiVersion", ""),
            kind=data.get("kind", ""),
        )

    def deep_copy(self) -> "StatefulMigrationList":
        return copy.deepcopy(self)