"""Profile validation."""

from meshnode.validation.profile import ProfileValidator, ValidationIssue, validate

__all__ = [
    'ProfileValidator',
    'ValidationIssue',
    'validate',
]
