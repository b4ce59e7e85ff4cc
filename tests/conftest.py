"""Pytest configuration and fixtures."""

from dataclasses import replace
from typing import Dict, List, Optional

import pytest

from mci_lb.forwarding_rule import ForwardingRule, ForwardingRuleProvider, ForwardingRuleSyncer
from mci_lb.namer import Namer
from mci_lb.utils.errors import ProviderError, ResourceNotFoundError


class InMemoryForwardingRuleProvider(ForwardingRuleProvider):
    """Provider with in-memory rule storage and call tracking."""

    def __init__(self, initial_rules: Optional[List[ForwardingRule]] = None):
        self._rules: Dict[str, ForwardingRule] = {}
        self._next_id = 1000
        self.calls: List[tuple] = []
        self.get_error: Optional[ProviderError] = None
        self.delete_error: Optional[ProviderError] = None
        self.create_error: Optional[ProviderError] = None

        for rule in initial_rules or []:
            self._rules[rule.name] = replace(rule)

    @property
    def mutating_calls(self) -> List[tuple]:
        return [call for call in self.calls if call[0] != 'get']

    def get(self, name: str) -> ForwardingRule:
        self.calls.append(('get', name))
        if self.get_error:
            raise self.get_error
        if name not in self._rules:
            raise ResourceNotFoundError(f"The resource '{name}' was not found")
        return replace(self._rules[name])

    def create(self, rule: ForwardingRule) -> None:
        self.calls.append(('create', replace(rule)))
        if self.create_error:
            raise self.create_error
        if rule.name in self._rules:
            raise ProviderError(f"The resource '{rule.name}' already exists", code=409)
        self._next_id += 1
        self._rules[rule.name] = replace(
            rule,
            creation_timestamp='2017-10-19T08:40:00.000-07:00',
            id=self._next_id,
            kind='compute#forwardingRule',
            self_link=f'https://www.googleapis.com/compute/v1/projects/p/global/forwardingRules/{rule.name}',
        )

    def delete(self, name: str) -> None:
        self.calls.append(('delete', name))
        if self.delete_error:
            if isinstance(self.delete_error, ResourceNotFoundError):
                # Deleted concurrently by another caller
                self._rules.pop(name, None)
            raise self.delete_error
        if name not in self._rules:
            raise ResourceNotFoundError(f"The resource '{name}' was not found")
        del self._rules[name]

    def set_target(self, name: str, target: str) -> None:
        self.calls.append(('set_target', name, target))
        if name not in self._rules:
            raise ResourceNotFoundError(f"The resource '{name}' was not found")
        self._rules[name].target = target

    def stored(self, name: str) -> Optional[ForwardingRule]:
        return self._rules.get(name)

    def store(self, rule: ForwardingRule) -> None:
        self._rules[rule.name] = replace(rule)


@pytest.fixture
def provider():
    """Empty in-memory forwarding rule provider."""
    return InMemoryForwardingRuleProvider()


@pytest.fixture
def namer():
    return Namer("lb1")


@pytest.fixture
def syncer(namer, provider):
    """Syncer for load balancer lb1 with default policy and settings."""
    return ForwardingRuleSyncer(namer=namer, provider=provider)
