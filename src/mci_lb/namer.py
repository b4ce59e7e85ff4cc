"""Stable resource names for multicluster load balancer components."""

import re

# GCE resource names: [a-z]([-a-z0-9]*[a-z0-9])?, at most 63 characters
MAX_NAME_LENGTH = 63
NAME_PREFIX = "mci1"

_VALID_NAME = re.compile(r"^[a-z]([-a-z0-9]*[a-z0-9])?$")

# Longest resource tag in use, see https_forwarding_rule_name()
_LONGEST_TAG = "fws"


class Namer:
    """Derives resource names from a load balancer name.

    Names depend only on the load balancer name, so every process computes
    the same name for the same load balancer. Load balancer names are used
    verbatim; names that are not valid GCE name segments, or too long to fit
    every resource name, are rejected rather than rewritten so that distinct
    load balancers never share a resource.
    """

    def __init__(self, lb_name: str, prefix: str = NAME_PREFIX):
        max_length = self.max_lb_name_length(prefix)
        if not lb_name:
            raise ValueError("Load balancer name cannot be empty")
        if not _VALID_NAME.match(lb_name):
            raise ValueError(
                f"Invalid load balancer name {lb_name!r}: use lowercase letters, digits and '-', "
                "starting with a letter and not ending with '-'"
            )
        if len(lb_name) > max_length:
            raise ValueError(
                f"Load balancer name {lb_name!r} is longer than {max_length} characters"
            )
        self.lb_name = lb_name
        self.prefix = prefix

    @staticmethod
    def max_lb_name_length(prefix: str = NAME_PREFIX) -> int:
        return MAX_NAME_LENGTH - len(f"{prefix}-{_LONGEST_TAG}-")

    def _name(self, resource_tag: str) -> str:
        return f"{self.prefix}-{resource_tag}-{self.lb_name}"

    def http_forwarding_rule_name(self) -> str:
        return self._name("fw")

    def https_forwarding_rule_name(self) -> str:
        return self._name(_LONGEST_TAG)
