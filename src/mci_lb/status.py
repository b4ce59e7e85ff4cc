"""Load balancer status stored in the forwarding rule description."""

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError

from mci_lb.utils.errors import DecodingError, EncodingError


class LoadBalancerStatus(BaseModel):
    """Status of a multicluster load balancer.

    Serialized with the same JSON keys the rest of the controller writes, so
    descriptions created by other components decode unchanged.
    """

    model_config = ConfigDict(populate_by_name=True)

    description: str = Field("", alias="Description")
    load_balancer_name: str = Field(..., alias="LoadBalancerName")
    clusters: List[str] = Field(default_factory=list, alias="Clusters")
    ip_address: str = Field("", alias="IPAddress")

    @field_validator("clusters", mode="before")
    @classmethod
    def empty_clusters(cls, v: Any) -> Any:
        """Treat a null cluster list as empty."""
        return [] if v is None else v

    def to_string(self) -> str:
        """Encode the status for storage in a description field.

        Raises:
            EncodingError: If the record cannot be serialized
        """
        try:
            return self.model_dump_json(by_alias=True)
        except PydanticSerializationError as e:
            raise EncodingError(f"Failed to encode load balancer status: {e}", cause=e)

    @classmethod
    def from_string(cls, value: str) -> "LoadBalancerStatus":
        """Decode a status previously written by to_string().

        Raises:
            DecodingError: If the value is not a valid encoded status
        """
        try:
            return cls.model_validate_json(value)
        except PydanticValidationError as e:
            raise DecodingError(f"Failed to decode load balancer status: {e}", cause=e)
