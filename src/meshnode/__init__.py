"""Configuration and live status model for mesh VPN nodes."""

__version__ = '0.1.0'

from meshnode.models import NetworkProfile, ProfileSummary
from meshnode.status import decode_running_info, pair
from meshnode.utils.address import format_ipv4, parse_cidr, parse_ipv4
from meshnode.validation import ValidationIssue, validate

__all__ = [
    'NetworkProfile',
    'ProfileSummary',
    'ValidationIssue',
    'decode_running_info',
    'format_ipv4',
    'pair',
    'parse_cidr',
    'parse_ipv4',
    'validate',
]
