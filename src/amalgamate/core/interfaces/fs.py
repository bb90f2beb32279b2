from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, Sequence, runtime_checkable

from amalgamate.core.models import IncludeKind


@runtime_checkable
class PathResolverProtocol(Protocol):
    def resolve(self, reference: str, kind: IncludeKind, context_dir: Optional[Path] = None) -> Optional[Path]:
        ...

    def search_dirs(self, kind: IncludeKind) -> Sequence[Path]:
        ...
