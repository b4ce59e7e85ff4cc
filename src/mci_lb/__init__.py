"""Forwarding rule syncer for multicluster ingress load balancers."""

__version__ = "0.1.0"
