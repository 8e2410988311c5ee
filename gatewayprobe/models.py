"""Plain data types for gateways, endpoints, routes and ingress status."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Generic, Iterable, List, Optional, Set, Tuple, TypeVar
from urllib.parse import SplitResult


@dataclass(frozen=True)
class NamespacedName:
    """A namespace and name pair identifying a cluster object."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class GatewayConfig:
    """One configured gateway, optionally fronted by a service."""

    namespaced_name: NamespacedName
    service: Optional[NamespacedName] = None

    @property
    def namespace(self) -> str:
        return self.namespaced_name.namespace

    @property
    def name(self) -> str:
        return self.namespaced_name.name


@dataclass
class GatewayPluginConfig:
    """The external and cluster-local gateways in use."""

    external_gateways: List[GatewayConfig] = field(default_factory=list)
    local_gateways: List[GatewayConfig] = field(default_factory=list)

    def external_gateway(self) -> GatewayConfig:
        """Return the gateway serving external traffic."""
        if not self.external_gateways:
            raise ValueError("no external gateway configured")
        return self.external_gateways[0]

    def local_gateway(self) -> GatewayConfig:
        """Return the gateway serving cluster-local traffic."""
        if not self.local_gateways:
            raise ValueError("no local gateway configured")
        return self.local_gateways[0]


class Visibility(str, Enum):
    EXTERNAL_IP = "ExternalIP"
    CLUSTER_LOCAL = "ClusterLocal"


class HTTPOption(str, Enum):
    ENABLED = "Enabled"
    REDIRECTED = "Redirected"


class AddressType(str, Enum):
    IP_ADDRESS = "IPAddress"
    HOSTNAME = "Hostname"


@dataclass(frozen=True)
class EndpointPort:
    name: str
    port: int
    app_protocol: Optional[str] = None


@dataclass
class EndpointSubset:
    addresses: List[str] = field(default_factory=list)
    ports: List[EndpointPort] = field(default_factory=list)


@dataclass
class Endpoints:
    namespace: str
    name: str
    subsets: List[EndpointSubset] = field(default_factory=list)


@dataclass(frozen=True)
class GatewayAddress:
    value: str
    type: Optional[AddressType] = None


@dataclass
class Gateway:
    namespace: str
    name: str
    addresses: List[GatewayAddress] = field(default_factory=list)


@dataclass(frozen=True)
class Condition:
    type: str
    status: str


@dataclass
class RouteParentStatus:
    conditions: List[Condition] = field(default_factory=list)


@dataclass
class HTTPRoute:
    namespace: str
    name: str
    parents: Optional[List[RouteParentStatus]] = None


@dataclass(frozen=True)
class LoadBalancerIngressStatus:
    ip: str = ""
    domain_internal: str = ""


@dataclass
class IngressStatus:
    """The load-balancer part of an ingress status."""

    load_balancer: str = "Unknown"
    reason: str = ""
    message: str = ""
    public_load_balancer: List[LoadBalancerIngressStatus] = field(default_factory=list)
    private_load_balancer: List[LoadBalancerIngressStatus] = field(default_factory=list)

    def mark_load_balancer_ready(
        self,
        external: Iterable[LoadBalancerIngressStatus],
        internal: Iterable[LoadBalancerIngressStatus],
    ) -> None:
        self.load_balancer = "True"
        self.reason = ""
        self.message = ""
        self.public_load_balancer = list(external)
        self.private_load_balancer = list(internal)

    def mark_load_balancer_not_ready(self) -> None:
        self.load_balancer = "Unknown"
        self.reason = ""
        self.message = ""

    def mark_load_balancer_failed(self, reason: str, message: str) -> None:
        self.load_balancer = "False"
        self.reason = reason
        self.message = message


@dataclass
class Backends:
    """URLs to probe, grouped by visibility."""

    urls: Dict[Visibility, Set[SplitResult]] = field(default_factory=dict)
    http_option: HTTPOption = HTTPOption.ENABLED
    version: str = ""


@dataclass
class ProbeTarget:
    """A set of pod addresses and a port to probe the given URLs on."""

    pod_ips: Set[str] = field(default_factory=set)
    pod_port: str = ""
    urls: List[SplitResult] = field(default_factory=list)


class NotFoundError(LookupError):
    """Raised when an object is missing from a store."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f'{kind} "{name}" not found')
        self.kind = kind
        self.name = name


T = TypeVar("T")


class ObjectStore(Generic[T]):
    """An in-memory index of objects by namespace and name."""

    def __init__(self, kind: str, objects: Iterable[T] = ()) -> None:
        self.kind = kind
        self._objects: Dict[Tuple[str, str], T] = {}
        for obj in objects:
            self.add(obj)

    def add(self, obj: T) -> None:
        self._objects[(obj.namespace, obj.name)] = obj  # type: ignore[attr-defined]

    def get(self, namespace: str, name: str) -> T:
        try:
            return self._objects[(namespace, name)]
        except KeyError:
            raise NotFoundError(self.kind, name) from None

    def __len__(self) -> int:
        return len(self._objects)