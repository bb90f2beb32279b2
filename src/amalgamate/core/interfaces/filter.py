from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from amalgamate.core.models import IncludeKind


@runtime_checkable
class InclusionPolicyProtocol(Protocol):
    """Decides whether a resolved include is inlined or left untouched."""

    def should_inline(self, path: Path, kind: IncludeKind) -> bool:
        ...
