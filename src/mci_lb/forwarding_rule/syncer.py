"""Syncer for the forwarding rule of a multicluster load balancer."""

from typing import Any, Dict, List, Optional

from .models import (
    COMPARED_FIELDS,
    ChangeType,
    FetchOutcome,
    FetchResult,
    ForwardingRule,
    SyncPlan,
)
from .provider import ForwardingRuleProvider
from ..config.models import ForwardingRulePolicy, SyncSettings
from ..namer import Namer
from ..status import LoadBalancerStatus
from ..utils.errors import (
    DecodingError,
    ErrorContext,
    LoadBalancerNotFoundError,
    ProviderError,
    RejectedWithoutForceError,
    ResourceNotFoundError,
    StatusUnavailableError,
    ValidationError,
)
from ..utils.logging import LogContext, get_logger

logger = get_logger(__name__)

DESCRIPTION_TEMPLATE = "Http forwarding rule for kubernetes multicluster loadbalancer {lb_name}"


def forwarding_rule_diff(desired: ForwardingRule, live: ForwardingRule) -> Dict[str, Dict[str, Any]]:
    """Compare the fields that carry intent.

    Args:
        desired: Desired rule
        live: Rule as returned by the provider

    Returns:
        Mapping of differing field name to its desired and live values
    """
    diff = {}
    for name in COMPARED_FIELDS:
        desired_value = getattr(desired, name)
        live_value = getattr(live, name)
        if desired_value != live_value:
            diff[name] = {'desired': desired_value, 'live': live_value}
    return diff


def forwarding_rule_matches(desired: ForwardingRule, live: ForwardingRule) -> bool:
    """Return True if the live rule already has the desired configuration.

    Provider-assigned fields (creation timestamp, id, kind, self link) never
    take part in the comparison.
    """
    diff = forwarding_rule_diff(desired, live)
    if diff:
        logger.debug(f"Forwarding rules differ: {diff}")
        return False
    logger.debug("Forwarding rules match")
    return True


class ForwardingRuleSyncer:
    """Manages the global forwarding rules of a multicluster GCP L7 load balancer."""

    def __init__(
        self,
        namer: Namer,
        provider: ForwardingRuleProvider,
        policy: Optional[ForwardingRulePolicy] = None,
        settings: Optional[SyncSettings] = None
    ):
        """Initialize syncer.

        Args:
            namer: Derives the rule name for the load balancer
            provider: Performs forwarding rule API calls
            policy: Port range, protocol and scheme for desired rules
            settings: Reconciliation behavior settings
        """
        self.namer = namer
        self.provider = provider
        self.policy = policy or ForwardingRulePolicy()
        self.settings = settings or SyncSettings()

    def desired_forwarding_rule(
        self,
        lb_name: str,
        ip_address: str,
        target_proxy_link: str,
        clusters: List[str]
    ) -> ForwardingRule:
        """Build the desired HTTP forwarding rule.

        The cluster list is stored sorted in the description, so the same
        set of clusters always produces the same description.

        Raises:
            ValidationError: If lb_name or target_proxy_link is empty
            EncodingError: If the status cannot be encoded
        """
        if not lb_name:
            raise ValidationError("Load balancer name cannot be empty")
        if not target_proxy_link:
            raise ValidationError(
                "Target proxy link cannot be empty",
                context=ErrorContext(additional_info={'lb_name': lb_name})
            )

        status = LoadBalancerStatus(
            description=DESCRIPTION_TEMPLATE.format(lb_name=lb_name),
            load_balancer_name=lb_name,
            clusters=sorted(clusters),
            ip_address=ip_address,
        )

        return ForwardingRule(
            name=self.namer.http_forwarding_rule_name(),
            description=status.to_string(),
            ip_address=ip_address,
            target=target_proxy_link,
            port_range=self.policy.http_port_range,
            protocol=self.policy.protocol,
            load_balancing_scheme=self.policy.load_balancing_scheme,
        )

    def plan_http_forwarding_rule(
        self,
        lb_name: str,
        ip_address: str,
        target_proxy_link: str,
        clusters: List[str],
        force_update: bool = False
    ) -> SyncPlan:
        """Determine what ensure_http_forwarding_rule would do, without changing anything.

        Raises:
            ProviderError: If the lookup fails and fetch_error_policy is "raise"
        """
        desired = self.desired_forwarding_rule(lb_name, ip_address, target_proxy_link, clusters)
        fetched = self._fetch(desired.name)

        if fetched.outcome == FetchOutcome.ERROR:
            if self.settings.fetch_error_policy == 'raise':
                raise fetched.error
            logger.warning(
                f"Got error {fetched.error.message} while trying to get existing forwarding rule "
                f"{desired.name}. Will try to create new one"
            )

        if fetched.outcome != FetchOutcome.FOUND:
            return SyncPlan(desired=desired, change_type=ChangeType.CREATE)

        existing = fetched.rule
        logger.debug(f"Existing forwarding rule: {existing}\nDesired forwarding rule: {desired}")

        if forwarding_rule_matches(desired, existing):
            return SyncPlan(desired=desired, change_type=ChangeType.NO_CHANGE, current=existing)

        diff = forwarding_rule_diff(desired, existing)
        if not force_update:
            change_type = ChangeType.REJECTED
        elif set(diff) == {'target'}:
            change_type = ChangeType.RETARGET
        else:
            change_type = ChangeType.RECREATE

        return SyncPlan(desired=desired, change_type=change_type, current=existing, diff=diff)

    def ensure_http_forwarding_rule(
        self,
        lb_name: str,
        ip_address: str,
        target_proxy_link: str,
        clusters: List[str],
        force_update: bool = False
    ) -> SyncPlan:
        """Ensure that the desired HTTP forwarding rule exists.

        Does nothing if it exists already, else creates it. A differing rule
        is only overwritten when force_update is set. The cluster list is
        stored in the rule description for get_load_balancer_status().

        Returns:
            The executed plan

        Raises:
            RejectedWithoutForceError: If a differing rule exists and force_update is False
            ProviderError: If a provider call fails
        """
        logger.info("Ensuring http forwarding rule")
        plan = self.plan_http_forwarding_rule(
            lb_name, ip_address, target_proxy_link, clusters, force_update
        )
        name = plan.desired.name

        with LogContext(logger, resource_name=name, load_balancer=lb_name):
            if plan.change_type == ChangeType.NO_CHANGE:
                logger.info("Desired forwarding rule exists already")
            elif plan.change_type == ChangeType.REJECTED:
                logger.info("Will not overwrite this differing forwarding rule without the --force flag")
                raise RejectedWithoutForceError(
                    f"Will not overwrite forwarding rule {name} without --force",
                    diff=plan.diff,
                    context=ErrorContext(
                        resource_name=name,
                        operation='ensure',
                        additional_info={'differing_fields': sorted(plan.diff)}
                    )
                )
            elif plan.change_type == ChangeType.CREATE:
                self._create_forwarding_rule(plan.desired)
            else:
                logger.info(f"Updating existing forwarding rule {name} to match the desired state")
                self._update_forwarding_rule(plan)

        return plan

    def delete_forwarding_rules(self) -> None:
        """Delete the forwarding rules of the load balancer.

        Unlike the delete inside an update, a rule that does not exist is an
        error here.

        Raises:
            ProviderError: If deletion fails, including ResourceNotFoundError
        """
        # TODO: Also delete the https forwarding rule once it is created.
        name = self.namer.http_forwarding_rule_name()
        logger.info(f"Deleting forwarding rule {name}")
        try:
            self._delete(name, ignore_not_found=False)
        except ProviderError as e:
            logger.error(f"Error {e.message} in deleting forwarding rule {name}")
            raise
        logger.info(f"Forwarding rule {name} deleted successfully")

    def get_load_balancer_status(self, lb_name: str) -> LoadBalancerStatus:
        """Read the load balancer status stored in the forwarding rule.

        Raises:
            LoadBalancerNotFoundError: If the forwarding rule does not exist
            StatusUnavailableError: If the rule description cannot be decoded
            ProviderError: If the lookup fails for any other reason
        """
        # TODO: Fall back to the https rule once it is created.
        name = self.namer.http_forwarding_rule_name()
        fetched = self._fetch(name)

        # The load balancer is assumed not to exist until its forwarding rule exists.
        if fetched.outcome == FetchOutcome.NOT_FOUND:
            raise LoadBalancerNotFoundError(
                f"Load balancer {lb_name} does not exist",
                context=ErrorContext(resource_name=name, operation='status'),
                cause=fetched.error
            )
        if fetched.outcome == FetchOutcome.ERROR:
            raise fetched.error

        try:
            return LoadBalancerStatus.from_string(fetched.rule.description)
        except DecodingError as e:
            raise StatusUnavailableError(
                f"Error in parsing forwarding rule description. Cannot determine status of {lb_name} without it",
                context=ErrorContext(resource_name=name, operation='status'),
                cause=e
            )

    def _fetch(self, name: str) -> FetchResult:
        try:
            return FetchResult.found(self.provider.get(name))
        except ResourceNotFoundError as e:
            return FetchResult.not_found(e)
        except ProviderError as e:
            return FetchResult.failed(e)

    def _update_forwarding_rule(self, plan: SyncPlan) -> None:
        """Converge an existing rule.

        There is no update call for forwarding rules: the target can be set
        in place, any other change needs a delete and create.
        """
        desired = plan.desired
        name = desired.name

        if plan.change_type == ChangeType.RECREATE:
            logger.info(f"Deleting the existing forwarding rule {name} and will create a new one")
            try:
                self._delete(name, ignore_not_found=True)
            except ProviderError as e:
                logger.error(f"Error deleting global forwarding rule: {e.message}")
                raise
            self._create_forwarding_rule(desired)
            return

        try:
            self.provider.set_target(name, desired.target)
        except ProviderError as e:
            logger.error(
                f"Error setting proxy for forwarding rule. Target: {desired.target} Error: {e.message}"
            )
            raise
        logger.info(f"Forwarding rule {name} updated successfully")

    def _create_forwarding_rule(self, desired: ForwardingRule) -> None:
        logger.info(f"Creating forwarding rule {desired.name}")
        logger.debug(f"Creating forwarding rule {desired}")
        self.provider.create(desired)
        logger.info(f"Forwarding rule {desired.name} created successfully")

    def _delete(self, name: str, ignore_not_found: bool) -> None:
        try:
            self.provider.delete(name)
        except ResourceNotFoundError:
            if not ignore_not_found:
                raise
            logger.info(f"Forwarding rule {name} is already gone")
