"""
template_engine – Concrete TemplateEngineProtocol implementation for amalgamate.

Renders the begin/end comment templates with the single-brace rules of
:class:`StringInterpolator`.
"""

import logging
from typing import Mapping, Optional

from amalgamate.core.interfaces.templating import TemplateEngineProtocol
from amalgamate.processing.string_interpolator import StringInterpolator


class SingleBraceTemplateEngine(TemplateEngineProtocol):
    """Single-brace template engine using :class:`StringInterpolator`.

      • {name}      → mapping.get("name", "")
      • {{literal}} → rendered as "{literal}" (escape)
    """

    def __init__(
        self,
        *,
        interpolator: Optional[StringInterpolator] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._interp = interpolator or StringInterpolator()
        self._log = logger or logging.getLogger("amalgamate.templates")

    def render(self, template: str, variables: Mapping[str, str]) -> str:  # type: ignore[override]
        """Render *template* replacing {placeholders} via *variables*."""
        rendered = self._interp.interpolate(template, dict(variables))
        self._log.debug("rendered template %r -> %r", template, rendered)
        return rendered
