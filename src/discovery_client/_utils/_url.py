"""Path templating and query serialization.

Values are inserted verbatim: neither path segments nor query values are
percent-encoded, so ``p@ram`` stays ``p@ram``. Callers that need escaping must
escape the values they pass in.
"""

import json
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..models.errors import PathTemplateError

_PLACEHOLDER = re.compile(r"\{([+#]?)([^{}]+)\}")


def template_placeholders(template: str) -> List[str]:
    return [match.group(2) for match in _PLACEHOLDER.finditer(template)]


def stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def build_path(
    template: str, path_params: Mapping[str, Any]
) -> Tuple[str, Dict[str, Any]]:
    """Substitute path parameters into a template.

    Returns:
        The pathname and the parameters left over after substitution.

    Raises:
        PathTemplateError: When a placeholder has no value.
    """
    remaining = dict(path_params)

    def substitute(match: "re.Match[str]") -> str:
        name = match.group(2)
        if name in remaining:
            return stringify(remaining.pop(name))
        if name in path_params:
            return stringify(path_params[name])
        raise PathTemplateError(template, name)

    return _PLACEHOLDER.sub(substitute, template), remaining


def build_query(query_params: Mapping[str, Any]) -> Optional[str]:
    """Serialize parameters into a query string, or ``None`` when there are none.

    Falsy values other than ``None`` are kept (``size=0``, ``autoDelete=false``);
    sequences become one ``key=value`` pair per element.
    """
    pairs: List[str] = []
    for key, value in query_params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend(f"{key}={stringify(item)}" for item in value)
        else:
            pairs.append(f"{key}={stringify(value)}")
    return "&".join(pairs) if pairs else None
