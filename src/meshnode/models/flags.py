"""Descriptor table for the independent feature flags of a profile.

Editors iterate ``FEATURE_FLAGS`` to build one toggle per flag instead of
binding each field by hand. The table is built once at import time.
"""

from dataclasses import dataclass
from meshnode.models.profile import NetworkProfile
from operator import attrgetter


@dataclass(frozen=True)
class FlagDescriptor:
    """Label, help text and accessor pair for one boolean profile field."""

    field: str
    label: str
    help: str

    def __post_init__(self):
        if NetworkProfile.model_fields.get(self.field) is None:
            raise ValueError(f'NetworkProfile has no field {self.field!r}')
        object.__setattr__(self, '_getter', attrgetter(self.field))

    def get(self, profile: NetworkProfile) -> bool:
        return self._getter(profile)

    def set(self, profile: NetworkProfile, value: bool) -> None:
        setattr(profile, self.field, value)


FEATURE_FLAGS: tuple[FlagDescriptor, ...] = (
    FlagDescriptor(
        'latency_first',
        'Latency-First Mode',
        'Ignore hop count and select the path with the lowest total latency.',
    ),
    FlagDescriptor(
        'use_smoltcp',
        'Use User-Space Protocol Stack',
        'Use a user-space TCP/IP stack to avoid issues with OS firewalls.',
    ),
    FlagDescriptor('disable_ipv6', 'Disable IPv6', 'Disable IPv6 functionality for this node.'),
    FlagDescriptor(
        'enable_kcp_proxy', 'Enable KCP Proxy', 'Convert TCP traffic to KCP to reduce latency.'
    ),
    FlagDescriptor('disable_kcp_input', 'Disable KCP Input', 'Disable inbound KCP traffic.'),
    FlagDescriptor(
        'enable_quic_proxy', 'Enable QUIC Proxy', 'Convert TCP traffic to QUIC to reduce latency.'
    ),
    FlagDescriptor('disable_quic_input', 'Disable QUIC Input', 'Disable inbound QUIC traffic.'),
    FlagDescriptor(
        'disable_p2p',
        'Disable P2P',
        'Route all traffic through a manually specified relay server.',
    ),
    FlagDescriptor(
        'p2p_only',
        'P2P Only',
        'Only communicate with peers that have established P2P connections.',
    ),
    FlagDescriptor(
        'bind_device', 'Bind to Physical Device Only', 'Use only the physical network interface.'
    ),
    FlagDescriptor(
        'no_tun',
        'No TUN Mode',
        'Do not use a TUN interface. This node will be accessible but cannot initiate '
        'connections to others without SOCKS5.',
    ),
    FlagDescriptor('enable_exit_node', 'Enable Exit Node', 'Allow this node to be an exit node.'),
    FlagDescriptor(
        'relay_all_peer_rpc',
        'Relay All Peer RPC',
        'Relay all peer RPC packets, even for peers not in the whitelist.',
    ),
    FlagDescriptor(
        'multi_thread', 'Multi-Threaded Runtime', 'Use a multi-thread runtime for performance.'
    ),
    FlagDescriptor(
        'proxy_forward_by_system',
        'System Forwarding for Proxy',
        'Forward packets to proxy networks via the system kernel.',
    ),
    FlagDescriptor(
        'disable_encryption',
        'Disable Encryption',
        'Disable encryption for peer communication. Must be the same on all peers.',
    ),
    FlagDescriptor(
        'disable_udp_hole_punching',
        'Disable UDP Hole Punching',
        'Disable the UDP hole punching mechanism.',
    ),
    FlagDescriptor(
        'disable_sym_hole_punching',
        'Disable Symmetric NAT Hole Punching',
        'Disable special handling for symmetric NATs.',
    ),
    FlagDescriptor(
        'enable_magic_dns',
        'Enable Magic DNS',
        'Access nodes in the network by their hostname via a special DNS.',
    ),
    FlagDescriptor(
        'enable_private_mode',
        'Enable Private Mode',
        'Do not allow handshake or relay for nodes with a different network name or secret.',
    ),
)

_BY_FIELD = {flag.field: flag for flag in FEATURE_FLAGS}


def flag_by_field(name: str) -> FlagDescriptor:
    """Look up a flag descriptor by profile field name.

    Raises:
        KeyError: If the field is not a feature flag
    """
    return _BY_FIELD[name]
