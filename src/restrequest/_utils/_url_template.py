import re
from typing import Mapping, Optional

_PLACEHOLDER = re.compile(r"\{([^{}]*)\}")


def is_templated(url: str) -> bool:
    return "{" in url


def expand(template: str, params: Mapping[str, str]) -> str:
    """Replace each ``{key}`` in `template` with ``params[key]``.

    Placeholders without a matching key are left as they are. Values are
    inserted verbatim, without escaping.
    """
    if not is_templated(template):
        return template

    def _substitute(match: "re.Match[str]") -> str:
        key = match.group(1)
        if key in params:
            return str(params[key])
        return match.group(0)

    return _PLACEHOLDER.sub(_substitute, template)


def should_expand(url: str, params: Optional[Mapping[str, str]]) -> bool:
    return bool(params) and is_templated(url)
