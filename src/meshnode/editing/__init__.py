"""Editing helpers that sit between form widgets and the profile model."""

from meshnode.editing.adapters import (
    ProfileEditAdapter,
    lines_from_list,
    list_from_lines,
    optional_from_text,
    optional_int_from_text,
    text_from_optional,
    text_from_optional_int,
)
from meshnode.editing.cidr import CidrCollection, CidrEditor, EditorFocus, find_duplicates

__all__ = [
    'CidrCollection',
    'CidrEditor',
    'EditorFocus',
    'ProfileEditAdapter',
    'find_duplicates',
    'lines_from_list',
    'list_from_lines',
    'optional_from_text',
    'optional_int_from_text',
    'text_from_optional',
    'text_from_optional_int',
]
