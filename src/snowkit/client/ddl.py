"""
SQL statement rendering for Snowflake objects.

Option dictionaries from ResourceSpec.configuration are rendered in
declaration order:

    {"WAREHOUSE_SIZE": "SMALL", "AUTO_RESUME": True, "DIRECTORY": {"ENABLE": True}}
    -> WAREHOUSE_SIZE = 'SMALL' AUTO_RESUME = TRUE DIRECTORY = (ENABLE = TRUE)

Strings are quoted literals except for options that take identifiers or bare
keywords. The special FROM option renders as a clause (FROM '@stage').
"""

from typing import Any, Dict, Mapping, Optional, Sequence

from snowkit.models import CreateMode, ResourceKind, ResourceSpec, split_identifier

# Options whose values are object identifiers, never string literals
IDENTIFIER_OPTIONS = frozenset({
    "ALLOWED_NETWORK_RULES",
    "EXTERNAL_ACCESS_INTEGRATIONS",
})

# Top-level options whose values are bare keywords (MODE = EGRESS, TYPE = HOST_PORT)
KEYWORD_OPTIONS = frozenset({
    "MODE",
    "TYPE",
})

# Kinds dropped with CASCADE so contained objects go with them
CASCADE_KINDS = frozenset({
    ResourceKind.DATABASE,
    ResourceKind.SCHEMA,
})


def quote_literal(value: str) -> str:
    """Render a SQL string literal."""
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def render_value(value: Any, bare: bool = False) -> str:
    """Render an option value; bare strings are emitted without quotes."""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, Mapping):
        return "(" + render_options(value, nested=True) + ")"
    if isinstance(value, (list, tuple)):
        return "(" + ", ".join(render_value(item, bare=bare) for item in value) + ")"
    return str(value) if bare else quote_literal(str(value))


def render_options(options: Mapping[str, Any], nested: bool = False) -> str:
    """Render KEY = value pairs separated by spaces; None values are omitted."""
    parts = []
    for key, value in options.items():
        if value is None:
            continue
        key = key.upper()
        bare = key in IDENTIFIER_OPTIONS or (not nested and key in KEYWORD_OPTIONS)
        parts.append(f"{key} = {render_value(value, bare=bare)}")
    return " ".join(parts)


def render_create(spec: ResourceSpec, mode: CreateMode, options: Optional[Dict[str, Any]] = None) -> str:
    """
    Render the CREATE statement for a spec.

    Args:
        spec: Resource to create
        mode: OR_REPLACE or IF_NOT_EXISTS
        options: Options to render instead of spec.configuration
    """
    keyword = spec.kind.keyword
    if mode == CreateMode.OR_REPLACE:
        statement = f"CREATE OR REPLACE {keyword} {spec.name}"
    else:
        statement = f"CREATE {keyword} IF NOT EXISTS {spec.name}"

    remaining = dict(spec.configuration if options is None else options)
    source = remaining.pop("FROM", None)
    if source:
        statement += f" FROM {quote_literal(source)}"
    if spec.comment:
        remaining["COMMENT"] = spec.comment

    rendered = render_options(remaining)
    return f"{statement} {rendered}" if rendered else statement


def render_drop(kind: ResourceKind, name: str) -> str:
    statement = f"DROP {kind.keyword} IF EXISTS {name}"
    if kind in CASCADE_KINDS:
        statement += " CASCADE"
    return statement


def _scope_clause(scope: Optional[str]) -> str:
    if not scope:
        return ""
    depth = len(split_identifier(scope))
    container = "DATABASE" if depth == 1 else "SCHEMA"
    return f" IN {container} {scope}"


def render_show(kind: ResourceKind, name: str) -> str:
    """
    Render a SHOW ... LIKE statement for a single object.

    LIKE is case-insensitive and treats '_' as a wildcard, so callers must
    still compare the returned names exactly.
    """
    parts = split_identifier(name)
    short = parts[-1].strip('"')
    scope = ".".join(parts[:-1]) or None
    return f"SHOW {kind.show_keyword} LIKE {quote_literal(short)}{_scope_clause(scope)}"


def render_show_in_scope(kind: ResourceKind, scope: Optional[str]) -> str:
    return f"SHOW {kind.show_keyword}{_scope_clause(scope)}"


def render_alter_set(kind: ResourceKind, name: str, properties: Mapping[str, Any]) -> str:
    return f"ALTER {kind.keyword} {name} SET {render_options(properties)}"


def render_grant(privileges: Sequence[str], kind: ResourceKind, name: str, role: str) -> str:
    return f"GRANT {', '.join(privileges)} ON {kind.grant_keyword} {name} TO ROLE {role}"


def render_grant_database_role(database_role: str, role: str) -> str:
    return f"GRANT DATABASE ROLE {database_role} TO ROLE {role}"


def render_grant_role_to_user(role: str, user: str) -> str:
    return f"GRANT ROLE {role} TO USER {quote_identifier(user)}"


def quote_identifier(name: str) -> str:
    """Render a double-quoted identifier (user names may contain any character)."""
    return '"' + name.replace('"', '""') + '"'
