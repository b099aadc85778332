"""Error types shared by the address, decoding and validation layers."""

from typing import Any


class MeshNodeError(Exception):
    """Structured error for mesh node configuration and status handling."""

    def __init__(
        self,
        message: str,
        error_code: str,
        suggestion: str | None = None,
    ):
        """Initialize error with structured context.

        Args:
            message: Human-readable error description
            error_code: Structured error code (e.g., 'INVALID_CIDR')
            suggestion: Optional recovery suggestion for the user
        """
        self.message = message
        self.error_code = error_code
        self.suggestion = suggestion
        super().__init__(self._format())

    def _format(self) -> str:
        """Format error message with structured information."""
        parts = [f'[{self.error_code}] {self.message}']

        if self.suggestion:
            parts.append(f'💡 Suggestion: {self.suggestion}')

        return '\n'.join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            'error_code': self.error_code,
            'message': self.message,
            'suggestion': self.suggestion or '',
        }


class FormatError(MeshNodeError, ValueError):
    """Malformed address, CIDR or URL text."""

    def __init__(
        self,
        value: str,
        reason: str,
        error_code: str = 'INVALID_FORMAT',
        suggestion: str | None = None,
    ):
        self.value = value
        self.reason = reason
        super().__init__(
            message=f'{value!r}: {reason}',
            error_code=error_code,
            suggestion=suggestion,
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data['value'] = self.value
        data['reason'] = self.reason
        return data


class DecodeError(MeshNodeError):
    """Engine status report does not match the expected structure.

    ``field`` is the dotted path of the first failing location (empty when the
    payload could not be parsed at all); ``errors`` keeps every underlying
    problem for diagnostics.
    """

    def __init__(
        self,
        field: str,
        reason: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        self.field = field
        self.reason = reason
        self.errors = errors or []
        location = field or '<report>'
        super().__init__(
            message=f'{location}: {reason}',
            error_code=ErrorCodes.DECODE_FAILED,
            suggestion='Check that the engine version matches this client',
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data['field'] = self.field
        data['reason'] = self.reason
        return data


# Common error codes for consistency
class ErrorCodes:
    """Standard error codes for address parsing, validation and decoding."""

    # Address/format errors
    INVALID_FORMAT = 'INVALID_FORMAT'
    INVALID_IP = 'INVALID_IP'
    INVALID_CIDR = 'INVALID_CIDR'
    INVALID_URL = 'INVALID_URL'
    INVALID_PORT = 'INVALID_PORT'

    # Profile validation
    MISSING_VALUE = 'MISSING_VALUE'
    OUT_OF_RANGE = 'OUT_OF_RANGE'
    DUPLICATE_ENTRY = 'DUPLICATE_ENTRY'
    PORT_CONFLICT = 'PORT_CONFLICT'
    CONFLICTING_OPTIONS = 'CONFLICTING_OPTIONS'

    # Editing
    INCOMPLETE_CIDR = 'INCOMPLETE_CIDR'

    # Status reports
    DECODE_FAILED = 'DECODE_FAILED'

    # Configuration errors
    CONFIG_INVALID = 'CONFIG_INVALID'
