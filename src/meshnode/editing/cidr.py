"""Interactive CIDR entry and the duplicate policy for CIDR collections.

``CidrEditor`` models a segmented 'a . b . c . d / len' field: each octet is
typed separately, focus advances automatically after three digits and moves
back when a field is cleared. ``CidrCollection`` applies committed values to
a list of CIDR strings (for example ``NetworkProfile.proxy_cidrs``) without
ever creating duplicates.
"""

import re
from enum import IntEnum
from loguru import logger
from meshnode.utils.errors import ErrorCodes, FormatError


DEFAULT_PREFIX = 24

_NON_DIGITS = re.compile(r'[^0-9]')
_DIGITS = re.compile(r'[0-9]+')


class EditorFocus(IntEnum):
    """Which part of the CIDR editor has focus."""

    OCTET_1 = 0
    OCTET_2 = 1
    OCTET_3 = 2
    OCTET_4 = 3
    PREFIX = 4
    COMPLETE = 5


def _octet_value(text: str) -> int | None:
    if not _DIGITS.fullmatch(text):
        return None
    value = int(text)
    return value if value <= 255 else None


class CidrEditor:
    """Editing state for a single CIDR block.

    Empty octets display as ``0`` but are not valid until typed, so a fresh
    editor shows ``0.0.0.0/24`` and refuses to commit.
    """

    def __init__(self):
        self.octets: list[str] = ['', '', '', '']
        self.prefix: int = DEFAULT_PREFIX
        self.focus: EditorFocus = EditorFocus.OCTET_1

    @classmethod
    def parse_for_edit(cls, text: str) -> 'CidrEditor':
        """Seed an editor from existing CIDR text.

        The octets are seeded only when the address part has exactly four
        numeric parts in [0, 255]; the prefix only when it is an integer in
        [0, 32]. Anything else keeps the defaults, so malformed text never
        prevents opening the editor.
        """
        editor = cls()
        if not text:
            return editor

        parts = text.split('/')
        address_parts = parts[0].split('.')
        values = [_octet_value(part) for part in address_parts]
        if len(values) == 4 and None not in values:
            editor.octets = [str(value) for value in values]

        if len(parts) == 2 and _DIGITS.fullmatch(parts[1]) and int(parts[1]) <= 32:
            editor.prefix = int(parts[1])

        return editor

    def input_octet(self, index: int, text: str) -> str:
        """Apply new text typed into octet ``index`` (0-3).

        Returns:
            The text stored for the octet after filtering and clamping
        """
        if not 0 <= index <= 3:
            raise IndexError(f'octet index {index} out of range 0-3')

        previous = self.octets[index]
        if not text and previous:
            # Clearing a field steps back without touching the previous octet.
            self.octets[index] = ''
            if index > 0:
                self.focus = EditorFocus(index - 1)
            return ''

        filtered = _NON_DIGITS.sub('', text)
        if filtered and int(filtered) > 255:
            filtered = '255'
        self.octets[index] = filtered
        self.focus = EditorFocus(index)

        if len(filtered) >= 3:
            self.focus = EditorFocus(index + 1) if index < 3 else EditorFocus.PREFIX

        return filtered

    def set_prefix(self, value: int | str) -> int:
        """Set the prefix length, clamped to [0, 32].

        Strings are reduced to their digits, keeping a leading minus sign so
        negative input clamps to 0; an empty result leaves 0.
        """
        if isinstance(value, str):
            negative = value.lstrip().startswith('-')
            digits = _NON_DIGITS.sub('', value)
            value = int(digits) if digits else 0
            if negative:
                value = -value
        self.prefix = max(0, min(32, value))
        self.focus = EditorFocus.PREFIX
        return self.prefix

    @property
    def is_complete(self) -> bool:
        return all(_octet_value(octet) is not None for octet in self.octets)

    @property
    def display_text(self) -> str:
        """Get the editor contents with empty octets shown as 0."""
        return '.'.join(octet or '0' for octet in self.octets) + f'/{self.prefix}'

    def commit(self) -> str:
        """Produce the normalized 'o1.o2.o3.o4/prefix' string.

        Raises:
            FormatError: If any octet is missing or invalid
        """
        values = [_octet_value(octet) for octet in self.octets]
        if None in values:
            raise FormatError(
                self.display_text,
                f'{values.count(None)} of 4 octets missing or invalid',
                error_code=ErrorCodes.INCOMPLETE_CIDR,
                suggestion='Fill in every octet before saving',
            )

        self.focus = EditorFocus.COMPLETE
        return '.'.join(str(value) for value in values) + f'/{self.prefix}'


def find_duplicates(entries: list[str]) -> list[int]:
    """Get the indexes of entries that repeat an earlier entry."""
    seen: set[str] = set()
    duplicates = []
    for index, entry in enumerate(entries):
        if entry in seen:
            duplicates.append(index)
        seen.add(entry)
    return duplicates


class CidrCollection:
    """Edits a list of CIDR strings in place without creating duplicates.

    The collection is 'enabled' while it holds entries: disabling it clears
    the list and removing the last entry disables it.
    """

    def __init__(self, entries: list[str], enabled: bool | None = None):
        self.entries = entries
        self.enabled = bool(entries) if enabled is None else enabled

    def add(self, cidr: str) -> bool:
        """Append a CIDR; an identical existing entry makes this a no-op.

        Returns:
            True if the entry was appended
        """
        self.enabled = True
        if cidr in self.entries:
            logger.debug(f'Ignoring duplicate CIDR {cidr}')
            return False
        self.entries.append(cidr)
        return True

    def replace(self, index: int, cidr: str) -> bool:
        """Replace entry ``index``; rejected if another entry already equals ``cidr``.

        Returns:
            True if the entry was replaced (or already had this value)
        """
        self.enabled = True
        if any(i != index and entry == cidr for i, entry in enumerate(self.entries)):
            logger.debug(f'Rejecting edit of entry {index}: {cidr} already present')
            return False
        self.entries[index] = cidr
        return True

    def save(self, editor: CidrEditor, index: int | None = None) -> bool:
        """Commit an editor into the collection as a new entry or an edit.

        Raises:
            FormatError: If the editor cannot commit
        """
        cidr = editor.commit()
        if index is None:
            return self.add(cidr)
        return self.replace(index, cidr)

    def remove(self, index: int) -> str:
        removed = self.entries.pop(index)
        if not self.entries:
            self.enabled = False
        return removed

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled
        if not enabled:
            self.entries.clear()
