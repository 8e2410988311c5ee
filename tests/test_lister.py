from urllib.parse import urlsplit

import pytest

from gatewayprobe.lister import GatewayPodTargetLister
from gatewayprobe.models import (
    AddressType,
    Backends,
    EndpointPort,
    Endpoints,
    EndpointSubset,
    Gateway,
    GatewayAddress,
    GatewayConfig,
    GatewayPluginConfig,
    HTTPOption,
    NamespacedName,
    ObjectStore,
    Visibility,
)

NS = "istio-system"
PUBLIC = "istio-gateway"
PRIVATE = "knative-local-gateway"
PUBLIC_GW_ADDR = "11.22.33.44"


def _cfg(with_service):
    def gw(name):
        nn = NamespacedName(NS, name)
        return GatewayConfig(nn, nn if with_service else None)

    return GatewayPluginConfig([gw(PUBLIC)], [gw(PRIVATE)])


def _url(host, path):
    return urlsplit(f"//{host}{path}")


def _eps(name, *subsets):
    return Endpoints(NS, name, [EndpointSubset(a, [EndpointPort(n, p) for n, p in ports]) for a, ports in subsets])


private_one = _eps(PRIVATE, (["1.2.3.4"], [("http", 8081)]))
public_one = _eps(PUBLIC, (["1.2.3.4"], [("http", 8080)]))
public_ssl_one = _eps(PUBLIC, (["1.2.3.4"], [("http", 8443)]))
private_multi = _eps(
    PRIVATE,
    (["2.3.4.5"], [("asdf", 1234)]),
    (["3.4.5.6", "4.3.2.1"], [("http2", 4321), ("admin", 1337)]),
)
public_multi = _eps(
    PUBLIC,
    (["2.3.4.6"], [("asdf", 1230)]),
    (["3.4.5.7", "4.3.2.0"], [("asdf", 4320)]),
)
private_none = _eps(PRIVATE, ([], [("fdsa", 32)]))
public_none = _eps(PUBLIC, ([], [("fdsa", 32)]))


def _norm(targets):
    return sorted(
        (sorted(t.pod_ips), t.pod_port, sorted(u.geturl() for u in t.urls)) for t in targets
    )


def _run(objects, backends):
    lister = GatewayPodTargetLister(endpoints=ObjectStore("endpoints", objects))
    return lister.backends_to_probe_targets(_cfg(True), backends)


ROOT = {_url("example.com", "/")}


@pytest.mark.parametrize(
    "objects,backends,want",
    [
        (
            [private_one, public_one],
            Backends({Visibility.EXTERNAL_IP: ROOT}),
            [(["1.2.3.4"], "8080", ["http://example.com/"])],
        ),
        (
            [private_one, public_ssl_one],
            Backends({Visibility.EXTERNAL_IP: ROOT}, HTTPOption.REDIRECTED),
            [(["1.2.3.4"], "8443", ["https://example.com/"])],
        ),
        (
            [private_multi, public_multi],
            Backends({Visibility.CLUSTER_LOCAL: ROOT}, HTTPOption.REDIRECTED),
            [
                (["2.3.4.5"], "1234", ["http://example.com/"]),
                (["3.4.5.6", "4.3.2.1"], "4321", ["http://example.com/"]),
            ],
        ),
        (
            [private_multi, public_multi],
            Backends(
                {
                    Visibility.EXTERNAL_IP: {
                        _url("example.com", "/"),
                        _url("example.com", "/.well-known/knative"),
                    },
                    Visibility.CLUSTER_LOCAL: {
                        _url("rev.default.svc.cluster.local", "/"),
                        _url("rev.default.svc.cluster.local", "/.well-known/knative"),
                    },
                }
            ),
            [
                (["2.3.4.5"], "1234", ["http://rev.default.svc.cluster.local/", "http://rev.default.svc.cluster.local/.well-known/knative"]),
                (["2.3.4.6"], "1230", ["http://example.com/", "http://example.com/.well-known/knative"]),
                (["3.4.5.6", "4.3.2.1"], "4321", ["http://rev.default.svc.cluster.local/", "http://rev.default.svc.cluster.local/.well-known/knative"]),
                (["3.4.5.7", "4.3.2.0"], "4320", ["http://example.com/", "http://example.com/.well-known/knative"]),
            ],
        ),
    ],
    ids=["single", "https-redirected", "multi-subset", "complex"],
)
def test_backends_to_probe_targets(objects, backends, want):
    assert _norm(_run(objects, backends)) == sorted(want)


@pytest.mark.parametrize(
    "objects,visibility,exc,message",
    [
        ([public_one], Visibility.CLUSTER_LOCAL, LookupError,
         f'failed to get endpoints: endpoints "{PRIVATE}" not found'),
        ([private_none], Visibility.EXTERNAL_IP, LookupError,
         f'failed to get endpoints: endpoints "{PUBLIC}" not found'),
        ([private_none, public_one], Visibility.CLUSTER_LOCAL, RuntimeError,
         "no gateway pods available"),
        ([private_one, public_none], Visibility.EXTERNAL_IP, RuntimeError,
         "no gateway pods available"),
    ],
)
def test_backends_to_probe_targets_errors(objects, visibility, exc, message):
    with pytest.raises(exc) as info:
        _run(objects, Backends({visibility: ROOT}))
    assert str(info.value) == message


def _gateway_lister(addresses):
    gateways = ObjectStore("gateway", [Gateway(NS, PUBLIC, addresses)])
    return GatewayPodTargetLister(gateways=gateways)


def test_no_service_http():
    lister = _gateway_lister([GatewayAddress(PUBLIC_GW_ADDR, AddressType.IP_ADDRESS)])
    got = lister.backends_to_probe_targets(_cfg(False), Backends({Visibility.EXTERNAL_IP: ROOT}))
    assert _norm(got) == [([PUBLIC_GW_ADDR], "80", ["http://example.com/"])]


def test_no_service_https_redirected():
    lister = _gateway_lister([GatewayAddress(PUBLIC_GW_ADDR, AddressType.IP_ADDRESS)])
    got = lister.backends_to_probe_targets(
        _cfg(False), Backends({Visibility.EXTERNAL_IP: ROOT}, HTTPOption.REDIRECTED)
    )
    assert _norm(got) == [([PUBLIC_GW_ADDR], "443", ["https://example.com/"])]


def test_no_service_no_addresses():
    lister = _gateway_lister([])
    with pytest.raises(ValueError) as info:
        lister.backends_to_probe_targets(
            _cfg(False), Backends({Visibility.EXTERNAL_IP: ROOT}, HTTPOption.REDIRECTED)
        )
    assert str(info.value) == "no addresses available in status of Gateway istio-system/istio-gateway"


def test_no_service_missing_gateway():
    lister = GatewayPodTargetLister()
    with pytest.raises(LookupError, match="does not exist"):
        lister.backends_to_probe_targets(_cfg(False), Backends({Visibility.EXTERNAL_IP: ROOT}))