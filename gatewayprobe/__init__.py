"""Probe-target discovery, load-balancer status and route readiness for Gateway API ingresses."""

__version__ = "0.1.0"
__all__ = ["ingress", "lister", "models"]