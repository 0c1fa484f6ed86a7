from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Union


def _clean_none(d: Dict[str, Any]) -> Dict[str, Any]:
    """Return a shallow copy of d without None-valued keys."""
    return {k: v for k, v in d.items() if v is not None}


def _wire(key: str) -> Dict[str, str]:
    return {"wire": key}


class ResourceKind(str, enum.Enum):
    """Resource kinds searched by the dashboard, valued by their URL/JSON token."""

    S3 = "s3"
    EC2 = "ec2"
    RDS = "rds"
    LAMBDA = "lambda"
    DYNAMODB = "dynamodb"
    ECS = "ecs"

    @classmethod
    def parse(cls, token: str) -> Optional["ResourceKind"]:
        try:
            return cls(token)
        except ValueError:
            return None


@dataclass(frozen=True)
class Credentials:
    access_key_id: str
    secret_access_key: str
    region: str
    session_token: Optional[str] = None

    def __repr__(self) -> str:
        return f"Credentials(access_key_id={self.access_key_id!r}, region={self.region!r})"


# -----------------------------------------------------------------------------
# Per-kind details. Search fills the first group of fields; the detail fetch
# fills the rest. Unset fields are dropped from the JSON mapping.
# -----------------------------------------------------------------------------
class _Details:
    def to_dict(self) -> Dict[str, Any]:
        out = {f.metadata.get("wire", f.name): getattr(self, f.name) for f in fields(self)}
        return _clean_none(out)


@dataclass
class S3BucketDetails(_Details):
    creation_date: Any = field(default=None, metadata=_wire("creationDate"))
    tags: Optional[List[Dict[str, str]]] = None
    location: Optional[str] = None


@dataclass
class EC2InstanceDetails(_Details):
    state: Optional[str] = None
    instance_type: Optional[str] = field(default=None, metadata=_wire("type"))
    launch_time: Any = field(default=None, metadata=_wire("launchTime"))
    tags: Optional[List[Dict[str, str]]] = None
    vpc_id: Optional[str] = field(default=None, metadata=_wire("vpcId"))
    subnet_id: Optional[str] = field(default=None, metadata=_wire("subnetId"))
    private_ip: Optional[str] = field(default=None, metadata=_wire("privateIp"))
    public_ip: Optional[str] = field(default=None, metadata=_wire("publicIp"))


@dataclass
class RDSInstanceDetails(_Details):
    engine: Optional[str] = None
    status: Optional[str] = None
    endpoint: Optional[str] = None
    port: Optional[int] = None
    size: Optional[str] = None
    storage: Optional[int] = None
    multi_az: Optional[bool] = field(default=None, metadata=_wire("multiAZ"))
    tags: Optional[List[Dict[str, str]]] = None


@dataclass
class LambdaFunctionDetails(_Details):
    runtime: Optional[str] = None
    last_modified: Optional[str] = field(default=None, metadata=_wire("lastModified"))
    memory_size: Optional[int] = field(default=None, metadata=_wire("memorySize"))
    handler: Optional[str] = None
    timeout: Optional[int] = None
    role: Optional[str] = None
    tags: Optional[Dict[str, str]] = None


@dataclass
class DynamoDBTableDetails(_Details):
    status: Optional[str] = None
    creation_date: Any = field(default=None, metadata=_wire("creationDate"))
    item_count: Optional[int] = field(default=None, metadata=_wire("itemCount"))
    size_bytes: Optional[int] = field(default=None, metadata=_wire("sizeBytes"))
    key_schema: Optional[List[Dict[str, str]]] = field(default=None, metadata=_wire("keySchema"))
    provisioned_throughput: Optional[Dict[str, Any]] = field(default=None, metadata=_wire("provisionedThroughput"))
    tags: Optional[List[Dict[str, str]]] = None


@dataclass
class ECSServiceDetails(_Details):
    cluster: Optional[str] = None
    task_definition: Optional[str] = field(default=None, metadata=_wire("taskDefinition"))
    desired_count: Optional[int] = field(default=None, metadata=_wire("desiredCount"))
    running_count: Optional[int] = field(default=None, metadata=_wire("runningCount"))
    launch_type: Optional[str] = field(default=None, metadata=_wire("launchType"))
    status: Optional[str] = None
    events: Optional[List[Dict[str, Any]]] = None
    deployments: Optional[List[Dict[str, Any]]] = None
    tags: Optional[List[Dict[str, str]]] = None


Details = Union[
    S3BucketDetails,
    EC2InstanceDetails,
    RDSInstanceDetails,
    LambdaFunctionDetails,
    DynamoDBTableDetails,
    ECSServiceDetails,
]


@dataclass
class NormalizedResource:
    id: str
    kind: ResourceKind
    name: str
    region: Optional[str]
    details: Details

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind.value,
            "name": self.name or self.id,
            "region": self.region,
            "details": self.details.to_dict(),
        }


@dataclass
class KindResult:
    """Outcome of one search adapter: its resources, or the reason it failed."""

    kind: ResourceKind
    resources: List[NormalizedResource] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SearchReport:
    results: List[KindResult]

    @property
    def resources(self) -> List[NormalizedResource]:
        out: List[NormalizedResource] = []
        for r in self.results:
            out.extend(r.resources)
        return out

    @property
    def failed(self) -> List[ResourceKind]:
        return [r.kind for r in self.results if not r.ok]
