"""Placeholder substitution for property values.

``${key}`` spans are replaced with the value of ``key`` in the same
property map. Substitution is a single pass: replacement text is never
rescanned, so self references such as ``a=${a}`` terminate immediately.
Placeholders naming unknown keys are kept verbatim, and ``$${key}``
escapes a placeholder, producing the literal text ``${key}``.
"""

import re
from typing import Mapping, Optional

PLACEHOLDER_PATTERN = re.compile(r"(\$?)\$\{([^}]+)\}")


def interpolate(value: Optional[str], props: Mapping[str, Optional[str]]) -> Optional[str]:
    """Substitute every ``${key}`` in ``value`` with ``props[key]``.

    Args:
        value: Text possibly containing placeholders. ``None`` passes through.
        props: Lookup table for placeholder keys.

    Returns:
        The substituted text.
    """
    if value is None or "${" not in value:
        return value

    def _lookup(match: re.Match) -> str:
        if match.group(1):
            # Escaped: drop the escape character, keep the placeholder
            return match.group(0)[1:]
        replacement = props.get(match.group(2))
        return match.group(0) if replacement is None else replacement

    return PLACEHOLDER_PATTERN.sub(_lookup, value)


def interpolate_all(props: Mapping[str, Optional[str]]) -> dict[str, Optional[str]]:
    """Interpolate every value of ``props`` against the original ``props``.

    Lookups always see the values as they were before this call, so the
    result does not depend on iteration order.
    """
    return {key: interpolate(value, props) for key, value in props.items()}
