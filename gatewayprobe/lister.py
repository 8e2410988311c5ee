"""Turning probe backends into concrete gateway pod targets."""

from __future__ import annotations

from .models import (
    Backends,
    Endpoints,
    Gateway,
    GatewayPluginConfig,
    HTTPOption,
    NotFoundError,
    ObjectStore,
    ProbeTarget,
    Visibility,
)

_HTTP_PORT_NAMES = frozenset({"http", "http2", "http-80"})
_HTTPS_PORT_NAMES = frozenset({"https", "https-443"})


class GatewayPodTargetLister:
    """Lists the gateway pods (or addresses) that probes should be sent to."""

    def __init__(
        self,
        endpoints: ObjectStore[Endpoints] | None = None,
        gateways: ObjectStore[Gateway] | None = None,
    ) -> None:
        self.endpoints = endpoints if endpoints is not None else ObjectStore("endpoints")
        self.gateways = gateways if gateways is not None else ObjectStore("gateway")

    def backends_to_probe_targets(
        self, plugin_config: GatewayPluginConfig, backends: Backends
    ) -> list[ProbeTarget]:
        found_targets = 0
        targets: list[ProbeTarget] = []

        for visibility, urls in backends.urls.items():
            if visibility == Visibility.CLUSTER_LOCAL:
                gateway = plugin_config.local_gateway()
            else:
                gateway = plugin_config.external_gateway()
            secure = (
                visibility == Visibility.EXTERNAL_IP
                and backends.http_option == HTTPOption.REDIRECTED
            )
            scheme = "https" if secure else "http"
            ordered = sorted(urls, key=lambda u: u.geturl())

            if gateway.service is not None:
                service = gateway.service
                try:
                    eps = self.endpoints.get(service.namespace, service.name)
                except NotFoundError as err:
                    raise LookupError(f"failed to get endpoints: {err}") from err
                match_names = _HTTPS_PORT_NAMES if secure else _HTTP_PORT_NAMES
                for subset in eps.subsets:
                    if not subset.ports:
                        raise ValueError(
                            f"endpoints {service} have a subset without ports"
                        )
                    port_number = subset.ports[0].port
                    for port in subset.ports:
                        if port.name in match_names:
                            port_number = port.port
                            break
                        if port.app_protocol is not None and port.app_protocol in match_names:
                            port_number = port.port
                    target = ProbeTarget(
                        pod_ips=set(subset.addresses),
                        pod_port=str(port_number),
                        urls=[u._replace(scheme=scheme) for u in ordered],
                    )
                    if target.urls:
                        found_targets += len(target.pod_ips)
                        targets.append(target)
            else:
                try:
                    gw = self.gateways.get(gateway.namespace, gateway.name)
                except NotFoundError as err:
                    raise LookupError(
                        f'Gateway "{gateway.namespaced_name}" does not exist: {err}'
                    ) from err
                if not gw.addresses:
                    raise ValueError(
                        f"no addresses available in status of Gateway {gw.namespace}/{gw.name}"
                    )
                target = ProbeTarget(
                    pod_ips={gw.addresses[0].value},
                    pod_port="443" if secure else "80",
                    urls=[u._replace(scheme=scheme) for u in ordered],
                )
                if target.urls:
                    found_targets += len(target.pod_ips)
                    targets.append(target)

        if found_targets == 0:
            raise RuntimeError("no gateway pods available")
        return targets