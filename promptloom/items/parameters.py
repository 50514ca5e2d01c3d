"""
Template parameters.

Replaces ``{{key}}`` placeholders in prompt text with values from a
parameter mapping.
"""

import re
from typing import Any, Optional, Union

Scalar = Union[str, int, float, bool]
ParameterValue = Union[Scalar, list[Scalar]]
Parameters = dict[str, ParameterValue]

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")


def _to_text(value: Scalar) -> str:
    # bool is checked first since it is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def apply(text: str, parameters: Optional[Parameters] = None) -> str:
    """Substitute ``{{key}}`` placeholders in a string.

    Keys are trimmed before lookup. Placeholders whose key is not in the
    mapping are left untouched. Substituted values are not scanned again.

    Args:
        text: The text containing placeholders.
        parameters: Mapping of key to string, number, boolean or a list of those.

    Returns:
        The text with every known placeholder replaced.

    Example:
        >>> apply("Hello, {{ name }}!", {"name": "Ada"})
        'Hello, Ada!'
        >>> apply("Hi {{missing}}", {})
        'Hi {{missing}}'
    """
    if not parameters:
        return text

    def replace(match: re.Match) -> str:
        key = match.group(1).strip()
        if key not in parameters:
            return match.group(0)
        value = parameters[key]
        if isinstance(value, (list, tuple)):
            return ", ".join(_to_text(element) for element in value)
        return _to_text(value)

    return PLACEHOLDER_PATTERN.sub(replace, text)


def merge(base: Optional[Parameters], extra: Optional[Parameters]) -> Parameters:
    """Merge two mappings, ``extra`` winning on shared keys."""
    merged: Parameters = dict(base or {})
    merged.update(extra or {})
    return merged


def validate_parameters(data: Any) -> tuple[bool, list[str]]:
    """Validate a parameter mapping.

    Args:
        data: The candidate mapping.

    Returns:
        A tuple of (is_valid, errors).
    """
    if not isinstance(data, dict):
        return False, ["Parameters must be a dictionary"]

    errors: list[str] = []
    for key, value in data.items():
        if not isinstance(key, str):
            errors.append(f"Parameter key '{key}' must be a string")
            continue
        if isinstance(value, (list, tuple)):
            for element in value:
                if not isinstance(element, (str, int, float, bool)):
                    errors.append(
                        f"Parameter '{key}' contains an unsupported element: {element!r}"
                    )
        elif not isinstance(value, (str, int, float, bool)):
            errors.append(f"Parameter '{key}' must be a string, number, boolean or list")

    return len(errors) == 0, errors
