"""Forwarding rule provider interface and Compute Engine implementation."""

from abc import ABC, abstractmethod
from typing import Callable, Optional, TypeVar

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import compute_v1

from .models import ForwardingRule
from ..utils.errors import ErrorContext, error_handler
from ..utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

RESOURCE_TYPE = 'compute#forwardingRule'


class ForwardingRuleProvider(ABC):
    """Capability set for managing global forwarding rules.

    Implementations raise ResourceNotFoundError when no rule has the given
    name and ProviderError for every other failure.
    """

    @abstractmethod
    def get(self, name: str) -> ForwardingRule:
        """Fetch the live rule by name."""
        pass

    @abstractmethod
    def create(self, rule: ForwardingRule) -> None:
        """Create a rule from the full desired definition."""
        pass

    @abstractmethod
    def delete(self, name: str) -> None:
        """Delete the rule by name."""
        pass

    @abstractmethod
    def set_target(self, name: str, target: str) -> None:
        """Point an existing rule at a different target proxy."""
        pass


class GCEForwardingRuleProvider(ForwardingRuleProvider):
    """Provider for global forwarding rules backed by the Compute Engine API."""

    def __init__(
        self,
        project: str,
        client: Optional[compute_v1.GlobalForwardingRulesClient] = None,
        operation_timeout: int = 300
    ):
        """Initialize provider.

        Args:
            project: Google Cloud project id
            client: Compute client, created from application default credentials if omitted
            operation_timeout: Seconds to wait for each long-running operation
        """
        self.project = project
        self.client = client or compute_v1.GlobalForwardingRulesClient()
        self.operation_timeout = operation_timeout

    def get(self, name: str) -> ForwardingRule:
        fr = self._call('get', name, lambda: self.client.get(
            project=self.project,
            forwarding_rule=name
        ))
        return self._from_compute(fr)

    def create(self, rule: ForwardingRule) -> None:
        self._call('insert', rule.name, lambda: self.client.insert(
            project=self.project,
            forwarding_rule_resource=self._to_compute(rule)
        ).result(timeout=self.operation_timeout))

    def delete(self, name: str) -> None:
        self._call('delete', name, lambda: self.client.delete(
            project=self.project,
            forwarding_rule=name
        ).result(timeout=self.operation_timeout))

    def set_target(self, name: str, target: str) -> None:
        self._call('set_target', name, lambda: self.client.set_target(
            project=self.project,
            forwarding_rule=name,
            target_reference_resource=compute_v1.TargetReference(target=target)
        ).result(timeout=self.operation_timeout))

    def _call(self, operation: str, name: str, fn: Callable[[], T]) -> T:
        """Run a client call, translating API errors into provider errors."""
        try:
            return fn()
        except (GoogleAPIError, GoogleAuthError, ConnectionError, TimeoutError) as e:
            context = ErrorContext(
                resource_name=name,
                resource_type=RESOURCE_TYPE,
                provider_operation=f'globalForwardingRules.{operation}'
            )
            error = error_handler.handle_exception(e, context)
            logger.debug(f"globalForwardingRules.{operation} on {name} failed: {error.message}")
            raise error from e

    @staticmethod
    def _to_compute(rule: ForwardingRule) -> compute_v1.ForwardingRule:
        return compute_v1.ForwardingRule(
            name=rule.name,
            description=rule.description,
            I_p_address=rule.ip_address,
            I_p_protocol=rule.protocol,
            port_range=rule.port_range,
            target=rule.target,
            load_balancing_scheme=rule.load_balancing_scheme,
        )

    @staticmethod
    def _from_compute(fr: compute_v1.ForwardingRule) -> ForwardingRule:
        return ForwardingRule(
            name=fr.name,
            ip_address=fr.I_p_address,
            port_range=fr.port_range,
            protocol=fr.I_p_protocol,
            load_balancing_scheme=fr.load_balancing_scheme,
            target=fr.target,
            description=fr.description,
            creation_timestamp=fr.creation_timestamp,
            id=fr.id,
            kind=fr.kind,
            self_link=fr.self_link,
        )
