"""Shared utilities for meshnode."""

from meshnode.utils.errors import DecodeError, ErrorCodes, FormatError, MeshNodeError
from meshnode.utils.logging import configure_from_settings, configure_logging, get_logger
from meshnode.utils.settings import Settings

__all__ = [
    'DecodeError',
    'ErrorCodes',
    'FormatError',
    'MeshNodeError',
    'Settings',
    'configure_from_settings',
    'configure_logging',
    'get_logger',
]
