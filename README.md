# gatewayprobe

Helpers for working out where to probe, and what load-balancer status to
report, for ingresses served through Gateway API gateways. Everything works
on plain in-memory data: you describe gateways, endpoints and routes with the
dataclasses in `gatewayprobe.models`, and the package computes the answers.

## What it does

* **Which pods should be probed?**
  `gatewayprobe.lister.GatewayPodTargetLister.backends_to_probe_targets`
  turns a `Backends` value (URLs grouped by `Visibility`) into a list of
  `ProbeTarget` values.
  * When the gateway for a visibility is fronted by a service, targets come
    from that service's `Endpoints`: one target per subset, with the subset's
    addresses as `pod_ips`. The port is the first one whose name is `http`,
    `http2` or `http-80` (or `https`, `https-443` for external traffic with
    `HTTPOption.REDIRECTED`); failing an exact name, the last port whose
    `app_protocol` matches; failing that, the subset's first port.
  * When there is no service, the first address in the `Gateway` status is
    used, on port `80`, or `443` for redirected external traffic.
  * URLs get the scheme `http`, or `https` for redirected external traffic.
* **What load-balancer status should an ingress carry?**
  `gatewayprobe.ingress.LoadBalancerResolver` resolves the external and
  cluster-local gateways of a `GatewayPluginConfig` into
  `LoadBalancerIngressStatus` values: the service hostname
  (`<name>.<namespace>.svc.cluster.local`) when a service is configured,
  otherwise the first `Gateway` status address, as `ip` for
  `AddressType.IP_ADDRESS` and as `domain_internal` for anything else.
* **Is a route ready?** `is_http_route_ready` is true when an `HTTPRoute`
  has parents and every parent has an `Accepted` condition with status
  `"True"`; `is_gateway_admitted` checks a single `RouteParentStatus`.

`IngressStatus` records the load-balancer condition through
`mark_load_balancer_ready`, `mark_load_balancer_not_ready` and
`mark_load_balancer_failed`. `ObjectStore` indexes objects by namespace and
name and raises `NotFoundError` for a missing one.

## Errors

`backends_to_probe_targets` raises:

* `LookupError` when the service's endpoints or the gateway cannot be found;
* `ValueError` when a gateway has no status addresses, or an endpoints
  subset has no ports;
* `RuntimeError("no gateway pods available")` when no target has any pod
  address.

`LoadBalancerResolver.collect_lb_ingress_status` marks the given
`IngressStatus` as failed (`GatewayDoesNotExist`) and raises
`GatewayNotFoundError` when the gateway is missing, and raises `ValueError`
when the gateway has no status address.

## Example

```python
from urllib.parse import urlsplit

from gatewayprobe.lister import GatewayPodTargetLister
from gatewayprobe.models import (
    Backends, EndpointPort, EndpointSubset, Endpoints, GatewayConfig,
    GatewayPluginConfig, NamespacedName, ObjectStore, Visibility,
)

gateway = NamespacedName("istio-system", "istio-gateway")
local = NamespacedName("istio-system", "knative-local-gateway")
config = GatewayPluginConfig(
    external_gateways=[GatewayConfig(gateway, service=gateway)],
    local_gateways=[GatewayConfig(local, service=local)],
)

endpoints = ObjectStore("endpoints", [
    Endpoints(
        namespace="istio-system",
        name="istio-gateway",
        subsets=[EndpointSubset(
            addresses=["1.2.3.4"],
            ports=[EndpointPort(name="http", port=8080)],
        )],
    ),
])

lister = GatewayPodTargetLister(endpoints=endpoints)
targets = lister.backends_to_probe_targets(
    config,
    Backends(urls={Visibility.EXTERNAL_IP: {urlsplit("//example.com/")}}),
)
# [ProbeTarget(pod_ips={'1.2.3.4'}, pod_port='8080',
#              urls=[SplitResult(scheme='http', netloc='example.com', path='/', ...)])]
```

## What it does not do

The package does not talk to a cluster, watch objects, send probes, or
create and update routes, gateway listeners or other resources. It only
computes probe targets, load-balancer statuses and route readiness from the
objects you hand it.

## Running the tests

```
pip install -e ".[test]"
pytest
```