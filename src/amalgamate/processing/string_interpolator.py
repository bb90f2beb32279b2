"""
string_interpolator – Minimal {single-brace} template interpolation.

  • {name}      → replaced by mapping.get("name", "")
  • {{ and }}   → literal "{" and "}"
  • anything else (e.g. "{not an ident}") is copied unchanged
"""

import re
from typing import Mapping


class StringInterpolator:
    """Single-brace interpolator with double-brace escaping."""

    _TOKEN_RX = re.compile(r"\{\{|\}\}|\{([A-Za-z_]\w*)\}")

    def interpolate(self, tpl: str, mapping: Mapping[str, str]) -> str:
        def _sub(match: "re.Match[str]") -> str:
            token = match.group(0)
            if token == "{{":
                return "{"
            if token == "}}":
                return "}"
            return str(mapping.get(match.group(1), ""))

        return self._TOKEN_RX.sub(_sub, tpl)
