"""Pydantic models for profiles, addresses and live status."""

from meshnode.models.address import EndpointUrl, Ipv4Addr, Ipv4Inet, Ipv6Addr, Url
from meshnode.models.flags import FEATURE_FLAGS, FlagDescriptor, flag_by_field
from meshnode.models.profile import (
    NetworkingMethod,
    NetworkProfile,
    PortForwardConfig,
    ProfileSummary,
)
from meshnode.models.status import (
    Event,
    NatType,
    NetworkInstance,
    NetworkInstanceRunningInfo,
    NodeInfo,
    NodeIps,
    PeerConnInfo,
    PeerConnStats,
    PeerInfo,
    PeerRoutePair,
    Route,
    StunInfo,
    TunnelInfo,
)

__all__ = [
    'EndpointUrl',
    'Event',
    'FEATURE_FLAGS',
    'FlagDescriptor',
    'Ipv4Addr',
    'Ipv4Inet',
    'Ipv6Addr',
    'NatType',
    'NetworkInstance',
    'NetworkInstanceRunningInfo',
    'NetworkProfile',
    'NetworkingMethod',
    'NodeInfo',
    'NodeIps',
    'PeerConnInfo',
    'PeerConnStats',
    'PeerInfo',
    'PeerRoutePair',
    'PortForwardConfig',
    'ProfileSummary',
    'Route',
    'StunInfo',
    'TunnelInfo',
    'Url',
    'flag_by_field',
]
