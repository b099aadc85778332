"""Parsing and formatting of IPv4/IPv6 addresses, CIDR blocks and endpoint URLs.

All functions are pure. Input is never trimmed: callers normalize whitespace
before parsing, so ``' 10.0.0.1'`` is rejected.
"""

import ipaddress
import re
from meshnode.models.address import EndpointUrl, Ipv4Addr, Ipv6Addr
from meshnode.utils.errors import ErrorCodes, FormatError
from urllib.parse import urlsplit


ENDPOINT_SCHEMES = ('tcp', 'udp', 'ws', 'wss', 'wg', 'quic', 'http', 'https')

DEFAULT_PORTS = {'http': 80, 'https': 443, 'ws': 80, 'wss': 443}

_DIGITS = re.compile(r'[0-9]+')
_HOSTNAME_LABEL = re.compile(r'(?!-)[A-Za-z0-9-]{1,63}(?<!-)')


def parse_ipv4(text: str) -> Ipv4Addr:
    """Parse a dotted-quad IPv4 address.

    Leading zeros are accepted and dropped ('010.0.0.1' is 10.0.0.1).

    Raises:
        FormatError: If the text is not exactly four dot-separated octets in [0, 255]
    """
    parts = text.split('.')
    if len(parts) != 4:
        raise FormatError(
            text, 'expected four dot-separated octets', error_code=ErrorCodes.INVALID_IP
        )

    addr = 0
    for part in parts:
        if not _DIGITS.fullmatch(part):
            raise FormatError(
                text, f'octet {part!r} is not a number', error_code=ErrorCodes.INVALID_IP
            )
        value = int(part)
        if value > 255:
            raise FormatError(
                text, f'octet {value} is out of range 0-255', error_code=ErrorCodes.INVALID_IP
            )
        addr = (addr << 8) | value

    return Ipv4Addr(addr=addr)


def format_ipv4(address: Ipv4Addr) -> str:
    """Format an IPv4 address as a canonical dotted quad."""
    return str(address)


def parse_cidr(text: str) -> tuple[Ipv4Addr, int]:
    """Parse 'a.b.c.d/len' into an address and prefix length.

    Raises:
        FormatError: If the address is malformed or the prefix is outside [0, 32]
    """
    address_text, sep, prefix_text = text.partition('/')
    if not sep:
        raise FormatError(text, 'missing /prefix', error_code=ErrorCodes.INVALID_CIDR)

    try:
        address = parse_ipv4(address_text)
    except FormatError as e:
        raise FormatError(text, e.reason, error_code=ErrorCodes.INVALID_CIDR) from e

    if not _DIGITS.fullmatch(prefix_text):
        raise FormatError(
            text, f'prefix {prefix_text!r} is not a number', error_code=ErrorCodes.INVALID_CIDR
        )
    prefix = int(prefix_text)
    if prefix > 32:
        raise FormatError(
            text, f'prefix {prefix} is out of range 0-32', error_code=ErrorCodes.INVALID_CIDR
        )

    return address, prefix


def format_cidr(address: Ipv4Addr, prefix: int) -> str:
    """Format an address and prefix length as 'a.b.c.d/len'."""
    return f'{format_ipv4(address)}/{prefix}'


def parse_ipv6(text: str) -> Ipv6Addr:
    """Parse an IPv6 address in any RFC 4291 text form.

    Raises:
        FormatError: If the text is not an IPv6 address
    """
    if text != text.strip():
        raise FormatError(text, 'unexpected whitespace', error_code=ErrorCodes.INVALID_IP)
    try:
        return Ipv6Addr.from_int(int(ipaddress.IPv6Address(text)))
    except ValueError as e:
        raise FormatError(text, str(e), error_code=ErrorCodes.INVALID_IP) from e


def parse_ip(text: str) -> Ipv4Addr | Ipv6Addr:
    """Parse an IPv4 or IPv6 address.

    Raises:
        FormatError: If the text is neither
    """
    if ':' in text:
        return parse_ipv6(text)
    return parse_ipv4(text)


def is_valid_hostname(host: str) -> bool:
    """Check if a host is a syntactically valid DNS name."""
    if not host or len(host) > 253:
        return False
    labels = host[:-1].split('.') if host.endswith('.') else host.split('.')
    return all(_HOSTNAME_LABEL.fullmatch(label) for label in labels)


def parse_endpoint_url(text: str, schemes: tuple[str, ...] = ENDPOINT_SCHEMES) -> EndpointUrl:
    """Parse a scheme://host:port endpoint.

    Args:
        text: URL text, e.g. 'tcp://0.0.0.0:11010' or 'udp://[::1]:11010'
        schemes: Accepted schemes

    Raises:
        FormatError: On a disallowed scheme, invalid host or invalid/missing port
    """
    if not text or any(ch.isspace() for ch in text):
        raise FormatError(
            text, 'URL is empty or contains whitespace', error_code=ErrorCodes.INVALID_URL
        )

    try:
        parts = urlsplit(text)
    except ValueError as e:
        raise FormatError(text, str(e), error_code=ErrorCodes.INVALID_URL) from e

    if parts.scheme not in schemes:
        raise FormatError(
            text,
            f'scheme must be one of: {", ".join(schemes)}',
            error_code=ErrorCodes.INVALID_URL,
        )

    host = parts.hostname
    if not host:
        raise FormatError(text, 'missing host', error_code=ErrorCodes.INVALID_URL)

    if ':' in host or host.replace('.', '').isdigit():
        try:
            parse_ip(host)
        except FormatError as e:
            raise FormatError(text, e.reason, error_code=ErrorCodes.INVALID_URL) from e
    elif not is_valid_hostname(host):
        raise FormatError(text, f'invalid host {host!r}', error_code=ErrorCodes.INVALID_URL)

    try:
        port = parts.port
    except ValueError as e:
        raise FormatError(text, str(e), error_code=ErrorCodes.INVALID_PORT) from e

    if port is None:
        port = DEFAULT_PORTS.get(parts.scheme)
        if port is None:
            raise FormatError(text, 'missing port', error_code=ErrorCodes.INVALID_PORT)
    if not 1 <= port <= 65535:
        raise FormatError(
            text, f'port {port} is out of range 1-65535', error_code=ErrorCodes.INVALID_PORT
        )

    return EndpointUrl(scheme=parts.scheme, host=host, port=port)
