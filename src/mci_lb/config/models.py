"""Pydantic models for configuration schema."""

from typing import List
from pydantic import BaseModel, Field, field_validator

from ..namer import Namer


HTTP_DEFAULT_PORT_RANGE = "80-80"
HTTPS_DEFAULT_PORT_RANGE = "443-443"


class ProjectConfig(BaseModel):
    """Google Cloud project configuration."""

    id: str = Field(..., min_length=6, max_length=30, pattern="^[a-z][-a-z0-9]*[a-z0-9]$")


class ForwardingRulePolicy(BaseModel):
    """Fixed forwarding rule settings applied to every desired rule."""

    http_port_range: str = Field(HTTP_DEFAULT_PORT_RANGE, pattern=r"^\d+-\d+$")
    # Reserved for the HTTPS rule, not used when creating rules yet
    https_port_range: str = Field(HTTPS_DEFAULT_PORT_RANGE, pattern=r"^\d+-\d+$")
    protocol: str = Field("TCP", pattern="^(TCP|UDP|ESP|AH|SCTP|ICMP|L3_DEFAULT)$")
    load_balancing_scheme: str = Field("EXTERNAL", pattern="^(EXTERNAL|EXTERNAL_MANAGED)$")

    @field_validator("http_port_range", "https_port_range")
    @classmethod
    def validate_port_range(cls, v: str) -> str:
        """Validate that the range is low-high within the TCP port space."""
        low, high = (int(part) for part in v.split("-"))
        if not 1 <= low <= high <= 65535:
            raise ValueError(f"Invalid port range: {v}")
        return v


class SyncSettings(BaseModel):
    """Reconciliation behavior settings."""

    # "create": a failed lookup is treated as absent and creation is attempted.
    # "raise": only a not-found lookup leads to creation, other errors propagate.
    fetch_error_policy: str = Field("create", pattern="^(create|raise)$")
    operation_timeout: int = Field(300, ge=1, le=3600)


class LoadBalancerConfig(BaseModel):
    """Load balancer whose forwarding rule is synced."""

    name: str = Field(..., min_length=1)
    ip_address: str = Field(..., min_length=1)
    target_proxy: str = Field(..., min_length=1)
    clusters: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate that the name maps to its own resource names."""
        Namer(v)
        return v

    @field_validator("clusters")
    @classmethod
    def validate_clusters(cls, v: List[str]) -> List[str]:
        for cluster in v:
            if not cluster:
                raise ValueError("Cluster names cannot be empty")
        if len(set(v)) != len(v):
            raise ValueError("Cluster names must be unique")
        return v


class MCIConfig(BaseModel):
    """Root configuration document."""

    project: ProjectConfig
    load_balancer: LoadBalancerConfig
    forwarding_rule: ForwardingRulePolicy = Field(default_factory=ForwardingRulePolicy)
    sync: SyncSettings = Field(default_factory=SyncSettings)
