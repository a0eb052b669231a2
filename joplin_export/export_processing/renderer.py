"""
Placeholder substitution for note titles and headers.

Templates use "{{name}}" placeholders. A placeholder is replaced only when its
trimmed name is a key of the rendering context; anything else stays in the
output verbatim so a typo shows up in the note instead of vanishing.
"""
import re
from typing import Any, Mapping

# Non-greedy and without DOTALL: a placeholder never spans lines.
PLACEHOLDER_PATTERN = re.compile(r"{{.*?}}")


def only_whitespace(text: str) -> bool:
    return len(text.strip()) == 0


def stringify(value: Any) -> str:
    """Render a context value the way it should appear in a note."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) for item in value)
    return str(value)


def render_template(template: str, context: Mapping[str, Any]) -> str:
    """
    Replace all known "{{key}}" placeholders of a template.

    Args:
        template: Template text
        context: Placeholder name to value mapping

    Returns:
        The rendered text. Replacement values are not scanned again.
    """
    if not template:
        return template

    def substitute(match: "re.Match[str]") -> str:
        key = match.group(0)[2:-2].strip()
        if key not in context:
            return match.group(0)
        return stringify(context[key])

    return PLACEHOLDER_PATTERN.sub(substitute, template)
