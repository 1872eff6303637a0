"""Brace-style prompt templates.

Templates use ``str.format`` placeholders (``"You are {persona}"``). Syntax is
checked once when an operation is registered; resolution at call time never
raises on a missing variable and leaves the placeholder text intact instead.
"""
from __future__ import annotations

import string
from typing import Any, Mapping, Optional, Tuple

from ..errors import ConfigurationError


class _SafeDict(dict):
    """Mapping that returns the original ``{key}`` text for missing keys."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def template_variables(template: str) -> Tuple[str, ...]:
    """Return the placeholder names used by ``template``, in order of appearance.

    Raises:
        ConfigurationError: If the template is malformed (unbalanced braces,
            positional or attribute/index placeholders, conversions).
    """
    names = []
    try:
        parsed = list(string.Formatter().parse(template))
    except ValueError as exc:
        raise ConfigurationError(f"malformed template {template!r}: {exc}") from exc
    for _literal, field_name, _spec, conversion in parsed:
        if field_name is None:
            continue
        if not field_name.isidentifier() or conversion:
            raise ConfigurationError(
                f"malformed template {template!r}: placeholder {{{field_name}}} must be a plain name"
            )
        if field_name not in names:
            names.append(field_name)
    return tuple(names)


def resolve_template(template: Optional[str], variables: Optional[Mapping[str, Any]] = None) -> Optional[str]:
    """Interpolate ``variables`` into ``template``.

    ``None`` templates resolve to ``None``. Unknown placeholders stay as-is;
    values are coerced with ``str``.
    """
    if template is None:
        return None
    values = {k: str(v) for k, v in (variables or {}).items()}
    return template.format_map(_SafeDict(values))


def is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


__all__ = ["template_variables", "resolve_template", "is_blank"]
