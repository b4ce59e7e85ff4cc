"""Forwarding rule resource shape and sync plan types."""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Optional

from mci_lb.utils.errors import ProviderError


# Fields carrying user intent; the only ones that take part in comparison
COMPARED_FIELDS = (
    'name',
    'ip_address',
    'port_range',
    'protocol',
    'load_balancing_scheme',
    'target',
    'description',
)

# Fields only the provider sets
PROVIDER_ASSIGNED_FIELDS = (
    'creation_timestamp',
    'id',
    'kind',
    'self_link',
    'server_response',
)


@dataclass
class ForwardingRule:
    """A global forwarding rule binding a virtual IP and port range to a target proxy."""
    name: str
    ip_address: str = ''
    port_range: str = ''
    protocol: str = ''
    load_balancing_scheme: str = ''
    target: str = ''
    description: str = ''

    creation_timestamp: str = ''
    id: int = 0
    kind: str = ''
    self_link: str = ''
    server_response: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self, include_provider_fields: bool = True) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if include_provider_fields or f.name not in PROVIDER_ASSIGNED_FIELDS
        }


class ChangeType(Enum):
    """Action needed to converge the live rule to the desired rule."""
    CREATE = "create"
    RETARGET = "retarget"
    RECREATE = "recreate"
    REJECTED = "rejected"
    NO_CHANGE = "no_change"


@dataclass
class SyncPlan:
    """Plan for converging a forwarding rule."""
    desired: ForwardingRule
    change_type: ChangeType
    current: Optional[ForwardingRule] = None
    diff: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def mutates(self) -> bool:
        return self.change_type in (ChangeType.CREATE, ChangeType.RETARGET, ChangeType.RECREATE)


class FetchOutcome(Enum):
    """Result of looking up a rule by name."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass
class FetchResult:
    """Tagged lookup result separating absence from a failed lookup."""
    outcome: FetchOutcome
    rule: Optional[ForwardingRule] = None
    error: Optional[ProviderError] = None

    @classmethod
    def found(cls, rule: ForwardingRule) -> 'FetchResult':
        return cls(FetchOutcome.FOUND, rule=rule)

    @classmethod
    def not_found(cls, error: Optional[ProviderError] = None) -> 'FetchResult':
        return cls(FetchOutcome.NOT_FOUND, error=error)

    @classmethod
    def failed(cls, error: ProviderError) -> 'FetchResult':
        return cls(FetchOutcome.ERROR, error=error)
