"""Profile models describing how a mesh node should be configured."""

from datetime import datetime, timezone
from enum import IntEnum
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Literal
from uuid import UUID, uuid4


DEFAULT_LISTENER_URLS = [
    'tcp://0.0.0.0:11010',
    'udp://0.0.0.0:11010',
    'wg://0.0.0.0:11011',
]

# Engine MTU defaults; encryption adds per-packet overhead.
ENCRYPTED_MTU = 1380
UNENCRYPTED_MTU = 1360


class NetworkingMethod(IntEnum):
    """How the node discovers the rest of the mesh."""

    PUBLIC_SERVER = 0
    MANUAL = 1
    STANDALONE = 2

    @property
    def label(self) -> str:
        return self.name.replace('_', ' ').title()


class PortForwardConfig(BaseModel):
    """Forward a local bind address to a destination reachable through the mesh."""

    model_config = ConfigDict(validate_assignment=True)

    id: UUID = Field(default_factory=uuid4, description='Local identifier for edits')
    bind_ip: str = Field(default='', description='Local address to listen on')
    bind_port: int = Field(default=0, description='Local port to listen on')
    dst_ip: str = Field(default='', description='Destination address')
    dst_port: int = Field(default=0, description='Destination port')
    proto: Literal['tcp', 'udp'] = Field(default='tcp', description='Forwarded protocol')

    @property
    def bind_key(self) -> tuple[str, int, str]:
        """Get the (bind_ip, bind_port, proto) triple that must be unique per profile."""
        return (self.bind_ip, self.bind_port, self.proto)

    @property
    def display_label(self) -> str:
        return f'{self.proto} {self.bind_ip}:{self.bind_port} -> {self.dst_ip}:{self.dst_port}'


class NetworkProfile(BaseModel):
    """Complete configuration of one mesh node.

    Every field carries a default so a freshly created profile is ready to
    serialize. Range and cross-field rules are not enforced here; run
    ``meshnode.validation.validate`` before handing the profile to the engine.
    Fields made inert by a toggle (e.g. ``routes`` while
    ``enable_manual_routes`` is off) keep their values.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: UUID = Field(default_factory=uuid4, description='Stable identifier')

    # Addressing
    dhcp: bool = Field(default=True, description='Let the engine assign the virtual address')
    virtual_ipv4: str = Field(default='10.144.144.0', description='Static virtual IPv4')
    network_length: int = Field(default=24, description='Static virtual prefix length')
    hostname: str | None = Field(default=None, description='Hostname override')

    # Identity and discovery
    network_name: str = Field(default='default', description='Mesh network name')
    network_secret: str = Field(default='', description='Shared network secret', repr=False)
    networking_method: NetworkingMethod = Field(
        default=NetworkingMethod.PUBLIC_SERVER,
        description='Discovery method selecting public_server_url or peer_urls',
    )
    public_server_url: str = Field(
        default='https://api.example.com', description='Public discovery server'
    )
    peer_urls: list[str] = Field(default_factory=list, description='Manually configured peers')

    # Routing
    proxy_cidrs: list[str] = Field(
        default_factory=list, description='Subnets advertised to other peers'
    )

    # VPN portal
    enable_vpn_portal: bool = Field(default=False, description='Expose a WireGuard portal')
    vpn_portal_listen_port: int = Field(default=22022, description='Portal listen port')
    vpn_portal_client_network_addr: str = Field(
        default='10.144.144.0', description='Portal client network address'
    )
    vpn_portal_client_network_len: int = Field(
        default=24, description='Portal client network prefix length'
    )

    advanced_settings: bool = Field(default=False, description='Editor shows advanced settings')

    # Listeners, in engine priority order
    listener_urls: list[str] = Field(
        default_factory=lambda: list(DEFAULT_LISTENER_URLS), description='Listener URLs'
    )
    dev_name: str = Field(default='utun10', description='TUN device name')

    # Feature flags
    latency_first: bool = False
    use_smoltcp: bool = False
    disable_ipv6: bool = False
    enable_kcp_proxy: bool = False
    disable_kcp_input: bool = False
    enable_quic_proxy: bool = False
    disable_quic_input: bool = False
    disable_p2p: bool = False
    p2p_only: bool = False
    bind_device: bool = False
    no_tun: bool = False
    enable_exit_node: bool = False
    relay_all_peer_rpc: bool = False
    multi_thread: bool = False
    proxy_forward_by_system: bool = False
    disable_encryption: bool = False
    disable_udp_hole_punching: bool = False
    disable_sym_hole_punching: bool = False
    enable_magic_dns: bool = False
    enable_private_mode: bool = False

    enable_relay_network_whitelist: bool = Field(
        default=False, description='Only relay for whitelisted networks'
    )
    relay_network_whitelist: list[str] = Field(
        default_factory=list, description='Networks this node relays for'
    )

    enable_manual_routes: bool = Field(default=False, description='Use routes below')
    routes: list[str] = Field(default_factory=list, description='Manual route CIDRs')

    port_forwards: list[PortForwardConfig] = Field(
        default_factory=list, description='Port forwards, in display order'
    )

    exit_nodes: list[str] = Field(default_factory=list, description='Exit node addresses')

    enable_socks5: bool = Field(default=False, description='Run a SOCKS5 server')
    socks5_port: int = Field(default=1080, description='SOCKS5 server port')

    mtu: int | None = Field(default=None, description='MTU override (400-1380)')
    mapped_listeners: list[str] = Field(
        default_factory=list, description='Externally mapped listener URLs'
    )

    @property
    def default_mtu(self) -> int:
        """Get the MTU the engine applies when ``mtu`` is unset."""
        return UNENCRYPTED_MTU if self.disable_encryption else ENCRYPTED_MTU

    @property
    def effective_mtu(self) -> int:
        return self.mtu if self.mtu is not None else self.default_mtu

    def add_port_forward(self, **fields: Any) -> PortForwardConfig:
        """Append a port forward and return it."""
        forward = PortForwardConfig(**fields)
        self.port_forwards.append(forward)
        return forward

    def find_port_forward(self, forward_id: UUID) -> PortForwardConfig | None:
        for forward in self.port_forwards:
            if forward.id == forward_id:
                return forward
        return None

    def remove_port_forward(self, forward_id: UUID) -> bool:
        """Remove the port forward with the given identifier.

        Returns:
            True if an entry was removed
        """
        remaining = [f for f in self.port_forwards if f.id != forward_id]
        removed = len(remaining) != len(self.port_forwards)
        self.port_forwards[:] = remaining
        return removed

    def to_engine_dict(self) -> dict[str, Any]:
        """Export the profile in engine field names.

        The editor-only ``advanced_settings`` flag and the local port-forward
        identifiers are dropped; everything else is passed through unchanged.
        """
        data = self.model_dump(mode='json', exclude={'advanced_settings'})
        for forward in data['port_forwards']:
            forward.pop('id', None)
        return data


class ProfileSummary(BaseModel):
    """Named handle for a stored profile.

    The summary and its profile share one identifier; renaming never changes it.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: UUID = Field(description='Identifier shared with the profile')
    name: str = Field(description='Display name')
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description='Creation time'
    )
    profile: NetworkProfile = Field(description='Owned configuration')

    @classmethod
    def create(cls, name: str = '') -> 'ProfileSummary':
        """Create a summary owning a fresh default profile."""
        profile = NetworkProfile()
        return cls(id=profile.id, name=name or 'New Network', profile=profile)

    def rename(self, name: str) -> bool:
        """Rename the profile; empty names are ignored.

        Returns:
            True if the name changed
        """
        if not name or name == self.name:
            return False
        self.name = name
        return True
