"""Live status models decoded from the engine's running-info report.

All models are immutable and ignore unknown fields so a newer engine can add
data without breaking older clients. Optional members decode to ``None`` when
absent; zero values (such as the all-zero IPv6 address) are real data.
"""

import json
from datetime import datetime, timezone
from enum import IntEnum
from meshnode.models.address import Ipv4Addr, Ipv4Inet, Ipv6Addr, Url
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any


class StatusModel(BaseModel):
    """Base for engine-owned, read-only records."""

    model_config = ConfigDict(frozen=True, extra='ignore')


class NatType(IntEnum):
    """NAT classification reported by STUN probing."""

    UNKNOWN = 0
    OPEN_INTERNET = 1
    NO_PAT = 2
    FULL_CONE = 3
    RESTRICTED = 4
    PORT_RESTRICTED = 5
    SYMMETRIC = 6
    SYM_UDP_FIREWALL = 7
    SYMMETRIC_EASY_INC = 8
    SYMMETRIC_EASY_DEC = 9

    @property
    def label(self) -> str:
        return self.name.replace('_', ' ').title()


class StunInfo(StatusModel):
    """STUN probe result."""

    udp_nat_type: NatType = Field(description='UDP NAT type')
    tcp_nat_type: NatType = Field(description='TCP NAT type')
    last_update_time: float = Field(strict=True, description='Unix time of last probe')

    @field_validator('udp_nat_type', 'tcp_nat_type', mode='before')
    @classmethod
    def _integer_tag(cls, value: Any) -> Any:
        # The engine sends the numeric tag; '3' or True is a contract violation.
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f'NAT type must be an integer tag, got {type(value).__name__}')
        return value


class NodeIps(StatusModel):
    """Addresses the local node discovered on its interfaces."""

    public_ipv4: Ipv4Addr | None = Field(default=None, description='Public IPv4')
    interface_ipv4s: list[Ipv4Addr] = Field(description='Interface IPv4 addresses')
    public_ipv6: Ipv6Addr | None = Field(default=None, description='Public IPv6')
    interface_ipv6s: list[Ipv6Addr] = Field(description='Interface IPv6 addresses')


class NodeInfo(StatusModel):
    """The local node as the engine sees it."""

    virtual_ipv4: Ipv4Inet = Field(description='Assigned virtual address')
    hostname: str = Field(strict=True, description='Hostname announced to peers')
    version: str = Field(strict=True, description='Engine version')
    ips: NodeIps | None = Field(default=None, description='Interface addresses')
    stun_info: StunInfo = Field(description='Local NAT probe result')
    listeners: list[Url] = Field(description='Active listeners')
    vpn_portal_cfg: str | None = Field(
        default=None, strict=True, description='WireGuard portal client config'
    )


class Route(StatusModel):
    """Reachability record for one peer."""

    peer_id: int = Field(ge=0, strict=True, description='Peer identifier (join key)')
    ipv4_addr: str | None = Field(default=None, strict=True, description='Virtual IPv4')
    next_hop_peer_id: int = Field(ge=0, strict=True, description='Next hop towards the peer')
    cost: int = Field(ge=0, strict=True, description='Hop cost; 0 is the local node')
    proxy_cidrs: list[str] = Field(description='Subnets the peer advertises')
    hostname: str = Field(strict=True, description='Peer hostname')
    stun_info: StunInfo | None = Field(default=None, description='Peer NAT probe result')
    inst_id: str = Field(strict=True, description='Peer engine instance ID')
    version: str = Field(strict=True, description='Peer engine version')

    @property
    def is_local(self) -> bool:
        return self.cost == 0

    @property
    def is_direct(self) -> bool:
        """Check if the peer is reached without a relay."""
        return self.peer_id == self.next_hop_peer_id

    @property
    def nat_type(self) -> NatType | None:
        return self.stun_info.udp_nat_type if self.stun_info else None


class TunnelInfo(StatusModel):
    """Transport underneath one peer connection."""

    tunnel_type: str = Field(strict=True, description='Transport (tcp, udp, wg, ...)')
    local_addr: Url = Field(description='Local endpoint')
    remote_addr: Url = Field(description='Remote endpoint')


class PeerConnStats(StatusModel):
    """Cumulative counters for one connection."""

    rx_bytes: int = Field(ge=0, strict=True, description='Received bytes')
    tx_bytes: int = Field(ge=0, strict=True, description='Transmitted bytes')
    rx_packets: int = Field(ge=0, strict=True, description='Received packets')
    tx_packets: int = Field(ge=0, strict=True, description='Transmitted packets')
    latency_us: int = Field(ge=0, strict=True, description='Latency in microseconds')


class PeerConnInfo(StatusModel):
    """One live connection to a peer."""

    conn_id: str = Field(strict=True, description='Connection identifier')
    my_peer_id: int = Field(ge=0, strict=True, description='Local peer identifier')
    is_client: bool = Field(strict=True, description='True if this node dialed out')
    peer_id: int = Field(ge=0, strict=True, description='Remote peer identifier')
    features: list[str] = Field(description='Negotiated features')
    tunnel: TunnelInfo | None = Field(default=None, description='Underlying transport')
    stats: PeerConnStats | None = Field(default=None, description='Traffic counters')
    loss_rate: float = Field(ge=0.0, le=1.0, strict=True, description='Loss estimate 0-1')

    @property
    def latency_ms(self) -> float | None:
        return self.stats.latency_us / 1000 if self.stats else None

    @property
    def tunnel_type(self) -> str | None:
        return self.tunnel.tunnel_type if self.tunnel else None


class PeerInfo(StatusModel):
    """A peer and all of its simultaneous connections."""

    peer_id: int = Field(ge=0, strict=True, description='Peer identifier')
    conns: list[PeerConnInfo] = Field(description='Live connections')

    @property
    def rx_bytes(self) -> int:
        return sum(c.stats.rx_bytes for c in self.conns if c.stats)

    @property
    def tx_bytes(self) -> int:
        return sum(c.stats.tx_bytes for c in self.conns if c.stats)

    @property
    def latency_ms(self) -> float | None:
        """Get the best latency across connections."""
        latencies = [c.latency_ms for c in self.conns if c.latency_ms is not None]
        return min(latencies) if latencies else None

    @property
    def loss_rate(self) -> float | None:
        """Get the mean loss rate across connections."""
        if not self.conns:
            return None
        return sum(c.loss_rate for c in self.conns) / len(self.conns)

    @property
    def tunnel_types(self) -> list[str]:
        """Get distinct transport types, in connection order."""
        seen: list[str] = []
        for conn in self.conns:
            if conn.tunnel_type and conn.tunnel_type not in seen:
                seen.append(conn.tunnel_type)
        return seen


class PeerRoutePair(StatusModel):
    """A route joined with the peer it leads to, if connected."""

    route: Route = Field(description='Route record')
    peer: PeerInfo | None = Field(default=None, description='Peer with live connections')

    @property
    def peer_id(self) -> int:
        return self.route.peer_id

    @property
    def is_connected(self) -> bool:
        return self.peer is not None

    @property
    def latency_ms(self) -> float | None:
        return self.peer.latency_ms if self.peer else None

    @property
    def loss_rate(self) -> float | None:
        return self.peer.loss_rate if self.peer else None

    @property
    def tunnel_types(self) -> list[str]:
        return self.peer.tunnel_types if self.peer else []


class Event(StatusModel):
    """One engine event log entry.

    The engine sends each entry as a JSON string ``{"time": ..., "event": {...}}``.
    Only the timestamp and the event tag are extracted; ``raw`` keeps the
    original text for renderers that know the full event taxonomy.
    """

    raw: str = Field(description='Event text exactly as sent')
    time: datetime = Field(description='Event timestamp')
    kind: str | None = Field(default=None, description='Event tag, e.g. PeerAdded')

    @model_validator(mode='before')
    @classmethod
    def _from_raw(cls, data: Any) -> Any:
        if not isinstance(data, str):
            return data

        try:
            body = json.loads(data)
        except json.JSONDecodeError as e:
            raise ValueError(f'event is not valid JSON: {e.msg}') from e
        if not isinstance(body, dict):
            raise ValueError('event must be a JSON object')

        fields: dict[str, Any] = {'raw': data}
        if 'time' in body:
            fields['time'] = body['time']

        event = body.get('event')
        if isinstance(event, dict) and len(event) == 1:
            fields['kind'] = next(iter(event))
        elif isinstance(event, str):
            fields['kind'] = event
        return fields

    @field_validator('time')
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        """Treat timestamps without an offset as UTC so events stay comparable."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def body(self) -> Any:
        """Get the decoded event body."""
        return json.loads(self.raw).get('event')


class NetworkInstanceRunningInfo(StatusModel):
    """Full runtime report of one engine instance."""

    dev_name: str = Field(strict=True, description='TUN device name')
    my_node_info: NodeInfo = Field(description='Local node')
    events: list[Event] = Field(description='Event log, as sent')
    routes: list[Route] = Field(description='Route table')
    peers: list[PeerInfo] = Field(description='Peer table')
    peer_route_pairs: list[PeerRoutePair] = Field(
        default_factory=list, description='Routes joined with peers'
    )
    running: bool = Field(strict=True, description='Engine is running')
    error_msg: str | None = Field(default=None, strict=True, description='Last engine error')

    @field_validator('peer_route_pairs', mode='before')
    @classmethod
    def _null_pairs(cls, value: Any) -> Any:
        # null means the engine did not join the tables; the decoder derives them.
        return [] if value is None else value

    @property
    def chronological_events(self) -> list[Event]:
        """Get events sorted by timestamp, oldest first."""
        return sorted(self.events, key=lambda event: event.time)

    def find_peer(self, peer_id: int) -> PeerInfo | None:
        for peer in self.peers:
            if peer.peer_id == peer_id:
                return peer
        return None


class NetworkInstance(StatusModel):
    """Handle for one engine instance plus its latest report."""

    instance_id: str = Field(strict=True, description='Instance identifier')
    running: bool = Field(strict=True, description='Instance is running')
    error_msg: str = Field(strict=True, description='Last error, empty if none')
    detail: NetworkInstanceRunningInfo | None = Field(
        default=None, description='Latest report; absent until the engine produces one'
    )

    @property
    def id(self) -> str:
        return self.instance_id

    @property
    def has_report(self) -> bool:
        return self.detail is not None
