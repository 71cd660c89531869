# ==============================================
# Table Naming
# ==============================================
#
# PURPOSE:
#   Resolve host table names and derive meta table names.
#
# TEMPLATING:
#   Host tables may be declared as "{{%user}}" (prefixed) or
#   "{{user}}" (quoted, no prefix). Plain names pass through.
#
#     resolve_table_name("{{%user}}", "app_")  → "app_user"
#     resolve_table_name("{{user}}", "app_")   → "user"
#     resolve_table_name("user", "app_")       → "user"
#
#     meta_table_name("{{%user}}", "app_")     → "app_user_meta"
#     meta_table_name("post")                  → "post_meta"
#
# ==============================================

import re

DEFAULT_META_SUFFIX = "_meta"

_TEMPLATE = re.compile(r"\{\{(%?)([^{}]+)\}\}")


def resolve_table_name(raw_name: str, table_prefix: str = "") -> str:
    """
    Expand "{{%name}}" / "{{name}}" templating into the real table name.

    Args:
        raw_name: Table name as declared on the record class
        table_prefix: Prefix substituted for "%"

    Returns:
        The table name as it exists in the database
    """
    def _expand(match: re.Match) -> str:
        prefix = table_prefix if match.group(1) else ""
        return prefix + match.group(2)

    return _TEMPLATE.sub(_expand, raw_name)


def meta_table_name(
    raw_name: str,
    table_prefix: str = "",
    suffix: str = DEFAULT_META_SUFFIX
) -> str:
    """Name of the meta table that extends the given host table."""
    if not suffix:
        raise ValueError("meta table suffix must not be empty")
    return resolve_table_name(raw_name, table_prefix) + suffix
