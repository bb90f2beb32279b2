from __future__ import annotations

"""Public surface for amalgamate.core.

Stable import location for the data model, the error taxonomy and the
protocol seams:

    from amalgamate.core import IncludeKind, CyclicIncludeError, ...
"""

from amalgamate.core.errors import (
    AmalgamateError,
    CyclicIncludeError,
    GlobSyntaxError,
    OutputWriteError,
    ResolutionError,
    SourceReadError,
    UnresolvableIncludeError,
)
from amalgamate.core.models import (
    ErrorHandling,
    ErrorPolicies,
    FileRecord,
    FileState,
    IncludeKind,
    IncludeReference,
    InvertibleGlob,
)

__all__ = [
    "AmalgamateError",
    "CyclicIncludeError",
    "GlobSyntaxError",
    "OutputWriteError",
    "ResolutionError",
    "SourceReadError",
    "UnresolvableIncludeError",
    "ErrorHandling",
    "ErrorPolicies",
    "FileRecord",
    "FileState",
    "IncludeKind",
    "IncludeReference",
    "InvertibleGlob",
]
