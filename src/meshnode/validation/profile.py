"""Cross-field validation of network profiles.

Validation reports; it never mutates the profile and never stops at the first
problem. Every rule runs and each problem becomes one ``ValidationIssue``.
The caller decides whether issues block submission to the engine or are
shown as warnings.

Rules that depend on a toggle (static addressing, VPN portal, SOCKS5) only
run while the toggle is on. Address lists (proxy CIDRs, manual routes, relay
whitelist, exit nodes, mapped listeners) are checked whatever their toggle
says.
"""

from meshnode.editing.cidr import find_duplicates
from meshnode.models.profile import NetworkingMethod, NetworkProfile
from meshnode.utils.address import (
    parse_cidr,
    parse_endpoint_url,
    parse_ip,
    parse_ipv4,
)
from meshnode.utils.errors import ErrorCodes, FormatError
from meshnode.utils.logging import log_validation_result
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Callable


MTU_MIN = 400
MTU_MAX = 1380


class ValidationIssue(BaseModel):
    """A single problem found in a profile."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(description='Field path, e.g. port_forwards[1].bind_port')
    message: str = Field(description='Human-readable description')
    code: str = Field(description='Error code from ErrorCodes')
    index: int | None = Field(default=None, description='List index for list entries')
    value: Any = Field(default=None, description='Offending value')

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode='json')


def _port_in_range(port: int) -> bool:
    return 1 <= port <= 65535


class ProfileValidator:
    """Runs every profile rule and collects the issues.

    Example:
        issues = ProfileValidator(profile).validate()
    """

    def __init__(self, profile: NetworkProfile):
        self.profile = profile
        self.issues: list[ValidationIssue] = []

    def _add(
        self,
        field: str,
        message: str,
        code: str,
        index: int | None = None,
        value: Any = None,
    ) -> None:
        self.issues.append(
            ValidationIssue(field=field, message=message, code=code, index=index, value=value)
        )

    def _check_each(
        self,
        field: str,
        entries: list[str],
        parse: Callable[[str], Any],
        code: str,
    ) -> int:
        """Report every entry that fails to parse.

        Returns:
            Number of entries that parsed
        """
        valid = 0
        for index, entry in enumerate(entries):
            try:
                parse(entry)
            except FormatError as e:
                self._add(f'{field}[{index}]', e.reason, code, index=index, value=entry)
            else:
                valid += 1
        return valid

    def validate(self) -> list[ValidationIssue]:
        """Run all rules.

        Returns:
            Issues found, in rule order; empty if the profile can be submitted
        """
        self.issues = []
        self.check_addressing()
        self.check_identity()
        self.check_discovery()
        self.check_listeners()
        self.check_vpn_portal()
        self.check_socks5()
        self.check_mtu()
        self.check_port_forwards()
        self.check_p2p()
        self.check_routing()
        log_validation_result(str(self.profile.id), self.issues)
        return list(self.issues)

    def check_addressing(self) -> None:
        """Static addressing needs a valid IPv4 address and prefix length."""
        profile = self.profile
        if profile.dhcp:
            return

        try:
            parse_ipv4(profile.virtual_ipv4)
        except FormatError as e:
            self._add('virtual_ipv4', e.reason, ErrorCodes.INVALID_IP, value=profile.virtual_ipv4)

        if not 0 <= profile.network_length <= 32:
            self._add(
                'network_length',
                'prefix length must be between 0 and 32',
                ErrorCodes.OUT_OF_RANGE,
                value=profile.network_length,
            )

    def check_identity(self) -> None:
        if not self.profile.network_name:
            self._add('network_name', 'network name is required', ErrorCodes.MISSING_VALUE)

    def check_discovery(self) -> None:
        """The selected networking method needs its own endpoint settings."""
        profile = self.profile
        method = profile.networking_method

        if method == NetworkingMethod.MANUAL:
            valid = self._check_each(
                'peer_urls', profile.peer_urls, parse_endpoint_url, ErrorCodes.INVALID_URL
            )
            if valid == 0:
                self._add(
                    'peer_urls',
                    'manual networking needs at least one valid peer URL',
                    ErrorCodes.MISSING_VALUE,
                )

        elif method == NetworkingMethod.PUBLIC_SERVER:
            if not profile.public_server_url:
                self._add(
                    'public_server_url',
                    'public server networking needs a server URL',
                    ErrorCodes.MISSING_VALUE,
                )
                return
            try:
                parse_endpoint_url(profile.public_server_url)
            except FormatError as e:
                self._add(
                    'public_server_url',
                    e.reason,
                    ErrorCodes.INVALID_URL,
                    value=profile.public_server_url,
                )

    def check_listeners(self) -> None:
        self._check_each(
            'listener_urls',
            self.profile.listener_urls,
            parse_endpoint_url,
            ErrorCodes.INVALID_URL,
        )
        self._check_each(
            'mapped_listeners',
            self.profile.mapped_listeners,
            parse_endpoint_url,
            ErrorCodes.INVALID_URL,
        )

    def check_vpn_portal(self) -> None:
        profile = self.profile
        if not profile.enable_vpn_portal:
            return

        if not _port_in_range(profile.vpn_portal_listen_port):
            self._add(
                'vpn_portal_listen_port',
                'port must be between 1 and 65535',
                ErrorCodes.INVALID_PORT,
                value=profile.vpn_portal_listen_port,
            )

        client_network = (
            f'{profile.vpn_portal_client_network_addr}/{profile.vpn_portal_client_network_len}'
        )
        try:
            parse_cidr(client_network)
        except FormatError as e:
            self._add(
                'vpn_portal_client_network',
                e.reason,
                ErrorCodes.INVALID_CIDR,
                value=client_network,
            )

    def check_socks5(self) -> None:
        """The SOCKS5 server binds TCP on every interface; no TCP listener may share its port."""
        profile = self.profile
        if not profile.enable_socks5:
            return

        if not _port_in_range(profile.socks5_port):
            self._add(
                'socks5_port',
                'port must be between 1 and 65535',
                ErrorCodes.INVALID_PORT,
                value=profile.socks5_port,
            )
            return

        for index, url in enumerate(profile.listener_urls):
            try:
                listener = parse_endpoint_url(url)
            except FormatError:
                continue
            if listener.transport == 'tcp' and listener.port == profile.socks5_port:
                self._add(
                    'socks5_port',
                    f'port {profile.socks5_port} is already used by listener {url}',
                    ErrorCodes.PORT_CONFLICT,
                    index=index,
                    value=profile.socks5_port,
                )

    def check_mtu(self) -> None:
        mtu = self.profile.mtu
        if mtu is not None and not MTU_MIN <= mtu <= MTU_MAX:
            self._add(
                'mtu',
                f'MTU must be between {MTU_MIN} and {MTU_MAX}',
                ErrorCodes.OUT_OF_RANGE,
                value=mtu,
            )

    def check_port_forwards(self) -> None:
        """Each forward needs valid endpoints; (bind_ip, bind_port, proto) must be unique."""
        seen: dict[tuple[str, int, str], int] = {}

        for index, forward in enumerate(self.profile.port_forwards):
            prefix = f'port_forwards[{index}]'

            for name in ('bind_port', 'dst_port'):
                port = getattr(forward, name)
                if not _port_in_range(port):
                    self._add(
                        f'{prefix}.{name}',
                        'port must be between 1 and 65535',
                        ErrorCodes.INVALID_PORT,
                        index=index,
                        value=port,
                    )

            for name in ('bind_ip', 'dst_ip'):
                address = getattr(forward, name)
                try:
                    parse_ip(address)
                except FormatError as e:
                    self._add(
                        f'{prefix}.{name}',
                        e.reason,
                        ErrorCodes.INVALID_IP,
                        index=index,
                        value=address,
                    )

            first = seen.setdefault(forward.bind_key, index)
            if first != index:
                self._add(
                    prefix,
                    f'duplicates port_forwards[{first}] '
                    f'({forward.proto} {forward.bind_ip}:{forward.bind_port})',
                    ErrorCodes.DUPLICATE_ENTRY,
                    index=index,
                    value=forward.display_label,
                )

    def check_p2p(self) -> None:
        if self.profile.disable_p2p and self.profile.p2p_only:
            self._add(
                'p2p_only',
                'disable_p2p and p2p_only cannot both be enabled',
                ErrorCodes.CONFLICTING_OPTIONS,
            )

    def check_routing(self) -> None:
        profile = self.profile

        self._check_each('proxy_cidrs', profile.proxy_cidrs, parse_cidr, ErrorCodes.INVALID_CIDR)
        for index in find_duplicates(profile.proxy_cidrs):
            self._add(
                f'proxy_cidrs[{index}]',
                'duplicate proxy CIDR',
                ErrorCodes.DUPLICATE_ENTRY,
                index=index,
                value=profile.proxy_cidrs[index],
            )

        self._check_each('routes', profile.routes, parse_cidr, ErrorCodes.INVALID_CIDR)
        self._check_each(
            'relay_network_whitelist',
            profile.relay_network_whitelist,
            _parse_cidr_or_ipv4,
            ErrorCodes.INVALID_CIDR,
        )
        self._check_each('exit_nodes', profile.exit_nodes, parse_ip, ErrorCodes.INVALID_IP)


def _parse_cidr_or_ipv4(text: str) -> Any:
    if '/' in text:
        return parse_cidr(text)
    return parse_ipv4(text)


def validate(profile: NetworkProfile) -> list[ValidationIssue]:
    """Validate a profile before it is handed to the engine.

    Returns:
        Every issue found; an empty list means the profile is acceptable
    """
    return ProfileValidator(profile).validate()
