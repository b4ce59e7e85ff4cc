"""Forwarding rule management for multicluster load balancers."""

from .models import (
    COMPARED_FIELDS,
    PROVIDER_ASSIGNED_FIELDS,
    ChangeType,
    FetchOutcome,
    FetchResult,
    ForwardingRule,
    SyncPlan,
)
from .provider import ForwardingRuleProvider, GCEForwardingRuleProvider
from .syncer import ForwardingRuleSyncer, forwarding_rule_diff, forwarding_rule_matches

__all__ = [
    'COMPARED_FIELDS',
    'PROVIDER_ASSIGNED_FIELDS',
    'ChangeType',
    'FetchOutcome',
    'FetchResult',
    'ForwardingRule',
    'SyncPlan',
    'ForwardingRuleProvider',
    'GCEForwardingRuleProvider',
    'ForwardingRuleSyncer',
    'forwarding_rule_diff',
    'forwarding_rule_matches',
]
