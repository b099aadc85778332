"""Text adapters between editor widgets and the profile model.

Form fields only deal in text. These helpers translate between that text and
the model's real types so the profile keeps true optionals: an empty hostname
field means ``None``, never ``''``, and an empty MTU field means ``None``,
never ``0``.
"""

import re
from meshnode.models.profile import NetworkProfile
from meshnode.utils.errors import ErrorCodes, FormatError


_DIGITS = re.compile(r'[0-9]+')


def text_from_optional(value: str | None) -> str:
    return value if value is not None else ''


def optional_from_text(text: str) -> str | None:
    return text if text else None


def text_from_optional_int(value: int | None) -> str:
    return str(value) if value is not None else ''


def optional_int_from_text(text: str) -> int | None:
    """Convert field text to an optional integer.

    Raises:
        FormatError: If the text is neither empty nor a non-negative integer
    """
    if not text:
        return None
    if not _DIGITS.fullmatch(text):
        raise FormatError(text, 'expected a whole number', error_code=ErrorCodes.INVALID_FORMAT)
    return int(text)


def lines_from_list(items: list[str]) -> str:
    return '\n'.join(items)


def list_from_lines(text: str) -> list[str]:
    """Split multi-line text into entries, dropping blank lines."""
    return [line for line in text.splitlines() if line]


class ProfileEditAdapter:
    """Text-valued view over a live profile for form editors.

    Every property reads from and writes through to the wrapped profile.
    """

    def __init__(self, profile: NetworkProfile):
        self.profile = profile

    @property
    def hostname_text(self) -> str:
        return text_from_optional(self.profile.hostname)

    @hostname_text.setter
    def hostname_text(self, text: str) -> None:
        self.profile.hostname = optional_from_text(text)

    @property
    def mtu_text(self) -> str:
        return text_from_optional_int(self.profile.mtu)

    @mtu_text.setter
    def mtu_text(self, text: str) -> None:
        self.profile.mtu = optional_int_from_text(text)

    @property
    def mtu_placeholder(self) -> str:
        """Get the hint shown while the MTU field is empty."""
        return f'Default: {self.profile.default_mtu}'

    def _lines(self, field: str) -> str:
        return lines_from_list(getattr(self.profile, field))

    def _set_lines(self, field: str, text: str) -> None:
        setattr(self.profile, field, list_from_lines(text))

    @property
    def peer_urls_text(self) -> str:
        return self._lines('peer_urls')

    @peer_urls_text.setter
    def peer_urls_text(self, text: str) -> None:
        self._set_lines('peer_urls', text)

    @property
    def listener_urls_text(self) -> str:
        return self._lines('listener_urls')

    @listener_urls_text.setter
    def listener_urls_text(self, text: str) -> None:
        self._set_lines('listener_urls', text)

    @property
    def routes_text(self) -> str:
        return self._lines('routes')

    @routes_text.setter
    def routes_text(self, text: str) -> None:
        self._set_lines('routes', text)

    @property
    def relay_network_whitelist_text(self) -> str:
        return self._lines('relay_network_whitelist')

    @relay_network_whitelist_text.setter
    def relay_network_whitelist_text(self, text: str) -> None:
        self._set_lines('relay_network_whitelist', text)

    @property
    def exit_nodes_text(self) -> str:
        return self._lines('exit_nodes')

    @exit_nodes_text.setter
    def exit_nodes_text(self, text: str) -> None:
        self._set_lines('exit_nodes', text)

    @property
    def mapped_listeners_text(self) -> str:
        return self._lines('mapped_listeners')

    @mapped_listeners_text.setter
    def mapped_listeners_text(self, text: str) -> None:
        self._set_lines('mapped_listeners', text)
