"""Address value types shared by profiles and status reports."""

import ipaddress
from pydantic import BaseModel, ConfigDict, Field
from typing import Literal


U32_MAX = 0xFFFFFFFF


class Ipv4Addr(BaseModel):
    """IPv4 address as the engine encodes it: one big-endian u32."""

    model_config = ConfigDict(frozen=True, extra='ignore')

    addr: int = Field(ge=0, le=U32_MAX, strict=True, description='Address as u32')

    @property
    def octets(self) -> tuple[int, int, int, int]:
        """Get the four octets, most significant first."""
        return (
            (self.addr >> 24) & 0xFF,
            (self.addr >> 16) & 0xFF,
            (self.addr >> 8) & 0xFF,
            self.addr & 0xFF,
        )

    def __str__(self) -> str:
        return '.'.join(str(octet) for octet in self.octets)


class Ipv4Inet(BaseModel):
    """IPv4 address with its network prefix length."""

    model_config = ConfigDict(frozen=True, extra='ignore')

    address: Ipv4Addr = Field(description='Interface address')
    network_length: int = Field(ge=0, le=32, strict=True, description='Prefix length')

    def __str__(self) -> str:
        return f'{self.address}/{self.network_length}'


class Ipv6Addr(BaseModel):
    """IPv6 address as four big-endian u32 parts."""

    model_config = ConfigDict(frozen=True, extra='ignore')

    part1: int = Field(ge=0, le=U32_MAX, strict=True, description='Bits 127-96')
    part2: int = Field(ge=0, le=U32_MAX, strict=True, description='Bits 95-64')
    part3: int = Field(ge=0, le=U32_MAX, strict=True, description='Bits 63-32')
    part4: int = Field(ge=0, le=U32_MAX, strict=True, description='Bits 31-0')

    @classmethod
    def from_int(cls, value: int) -> 'Ipv6Addr':
        """Split a 128-bit integer into the four wire parts."""
        return cls(
            part1=(value >> 96) & U32_MAX,
            part2=(value >> 64) & U32_MAX,
            part3=(value >> 32) & U32_MAX,
            part4=value & U32_MAX,
        )

    def to_int(self) -> int:
        return (self.part1 << 96) | (self.part2 << 64) | (self.part3 << 32) | self.part4

    def __str__(self) -> str:
        return str(ipaddress.IPv6Address(self.to_int()))


class Url(BaseModel):
    """URL wrapper used by the engine for listeners and tunnel endpoints."""

    model_config = ConfigDict(frozen=True, extra='ignore')

    url: str = Field(strict=True, description='URL text')

    def __str__(self) -> str:
        return self.url


class EndpointUrl(BaseModel):
    """Parsed scheme://host:port endpoint (listener, peer or server URL)."""

    model_config = ConfigDict(frozen=True)

    scheme: str = Field(description='Transport scheme (tcp, udp, wg, ...)')
    host: str = Field(description='Host name or IP address, without brackets')
    port: int = Field(ge=1, le=65535, description='Port number')

    @property
    def transport(self) -> Literal['tcp', 'udp']:
        """Get the IP protocol the scheme binds."""
        return 'udp' if self.scheme in ('udp', 'wg', 'quic') else 'tcp'

    @property
    def is_wildcard(self) -> bool:
        """Check if the endpoint binds every interface."""
        return self.host in ('0.0.0.0', '::')

    def __str__(self) -> str:
        host = f'[{self.host}]' if ':' in self.host else self.host
        return f'{self.scheme}://{host}:{self.port}'
