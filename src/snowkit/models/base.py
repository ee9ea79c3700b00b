"""
Base classes and utilities for snowkit models.

This module contains the shared Pydantic configuration and the identifier
helpers used across all resource models.
"""

from __future__ import annotations

import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


def split_identifier(name: str) -> List[str]:
    """
    Split a qualified Snowflake name into its parts.

    Dots inside double-quoted parts are preserved: 'DB."my.schema".STG'
    yields ['DB', '"my.schema"', 'STG'].
    """
    parts: List[str] = []
    current = []
    quoted = False
    for char in name.strip():
        if char == '"':
            quoted = not quoted
        if char == "." and not quoted:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def normalize_identifier(name: str) -> str:
    """
    Normalize a (possibly qualified) name for comparison.

    Unquoted parts are case-insensitive in Snowflake and resolve to upper case;
    quoted parts keep their case but lose the quotes.
    """
    normalized = []
    for part in split_identifier(name):
        if len(part) >= 2 and part.startswith('"') and part.endswith('"'):
            normalized.append(part[1:-1])
        else:
            normalized.append(part.upper())
    return ".".join(normalized)


def qualify(scope: Optional[str], name: str) -> str:
    """Join a scope and a short name into a qualified name."""
    return f"{scope}.{name}" if scope else name


def as_identifier(name: str) -> str:
    """
    Render a stored object name (as returned by SHOW) as an identifier part.

    Names that only resolve correctly when quoted (lower case, spaces, ...)
    are double-quoted.
    """
    if re.fullmatch(r"[A-Z_][A-Z0-9_$]*", name):
        return name
    return '"' + name.replace('"', '""') + '"'


class BaseSnowkitModel(BaseModel):
    """
    Base model for all snowkit objects with common configuration.

    This provides standard Pydantic v2 configuration shared by resource specs,
    artifact references and configuration sections.
    """

    model_config = ConfigDict(
        validate_default=True,  # Validate defaults once
        populate_by_name=True,  # Allow field population by name
        use_enum_values=False,  # Keep enums as enum objects
        str_strip_whitespace=True,  # Strip whitespace from strings
        extra="forbid",
    )
