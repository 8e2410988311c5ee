"""Load-balancer status lookup and route readiness checks."""

from __future__ import annotations

from .models import (
    AddressType,
    Gateway,
    GatewayConfig,
    GatewayPluginConfig,
    HTTPRoute,
    IngressStatus,
    LoadBalancerIngressStatus,
    NotFoundError,
    ObjectStore,
    RouteParentStatus,
)

_CLUSTER_DOMAIN = "cluster.local"
_ROUTE_ACCEPTED = "Accepted"


class GatewayNotFoundError(LookupError):
    """Raised when a configured gateway cannot be found."""


def _service_hostname(name: str, namespace: str) -> str:
    return f"{name}.{namespace}.svc.{_CLUSTER_DOMAIN}"


class LoadBalancerResolver:
    """Works out load-balancer addresses for the configured gateways."""

    def __init__(self, gateways: ObjectStore[Gateway] | None = None) -> None:
        self.gateways = gateways if gateways is not None else ObjectStore("gateway")

    def collect_lb_ingress_status(
        self, status: IngressStatus, gateway: GatewayConfig
    ) -> list[LoadBalancerIngressStatus]:
        """Return the address for one gateway: its service, or its first status address."""
        if gateway.service is not None:
            return [
                LoadBalancerIngressStatus(
                    domain_internal=_service_hostname(
                        gateway.service.name, gateway.service.namespace
                    )
                )
            ]

        where = f"{gateway.namespace}/{gateway.name}"
        try:
            gw = self.gateways.get(gateway.namespace, gateway.name)
        except NotFoundError as err:
            status.mark_load_balancer_failed(
                "GatewayDoesNotExist", f"could not find Gateway {where}"
            )
            raise GatewayNotFoundError(
                f"error getting Gateway {where}: could not find Gateway"
            ) from err

        if not gw.addresses:
            raise ValueError(f"no address found in status of Gateway {where}")
        first = gw.addresses[0]
        if first.type == AddressType.IP_ADDRESS:
            return [LoadBalancerIngressStatus(ip=first.value)]
        return [LoadBalancerIngressStatus(domain_internal=first.value)]

    def look_up_load_balancers(
        self, status: IngressStatus, plugin_config: GatewayPluginConfig
    ) -> tuple[list[LoadBalancerIngressStatus], list[LoadBalancerIngressStatus]]:
        """Return the external and internal load-balancer statuses."""
        external = self.collect_lb_ingress_status(status, plugin_config.external_gateway())
        internal = self.collect_lb_ingress_status(status, plugin_config.local_gateway())
        return external, internal


def is_http_route_ready(route: HTTPRoute) -> bool:
    """True when every parent gateway has accepted the route."""
    if route.parents is None:
        return False
    return all(is_gateway_admitted(parent) for parent in route.parents)


def is_gateway_admitted(parent: RouteParentStatus) -> bool:
    for condition in parent.conditions:
        if condition.type == _ROUTE_ACCEPTED:
            return condition.status == "True"
    return False