from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class IncludeKind(Enum):
    QUOTE = 'quote'
    SYSTEM = 'system'

    def wrap(self, reference: str) -> str:
        """Render *reference* with the delimiters of this kind."""
        return f'"{reference}"' if self is IncludeKind.QUOTE else f'<{reference}>'


class ErrorHandling(Enum):
    """Closed set of reactions to a policy-controlled error."""

    ERROR = 'error'
    WARN = 'warn'
    IGNORE = 'ignore'

    @classmethod
    def names(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def parse(cls, raw: str) -> 'ErrorHandling':
        try:
            return cls((raw or '').strip().lower())
        except ValueError:
            raise ValueError(f'invalid error handling: "{raw}"') from None


class FileState(Enum):
    IN_STACK = 'in_stack'
    DONE = 'done'


@dataclass(frozen=True)
class IncludeReference:
    raw: str
    kind: IncludeKind

    def __str__(self) -> str:
        return self.kind.wrap(self.raw)


@dataclass(frozen=True)
class InvertibleGlob:
    """A glob with a polarity; an inverted glob re-includes what it matches."""

    pattern: str
    inverted: bool = False

    @classmethod
    def parse(cls, raw: str) -> 'InvertibleGlob':
        if raw.startswith('!'):
            return cls(pattern=raw[1:], inverted=True)
        return cls(pattern=raw, inverted=False)

    def __str__(self) -> str:
        return f'!{self.pattern}' if self.inverted else self.pattern


@dataclass
class FileRecord:
    """Per-identity bookkeeping owned by the traversal engine."""

    identity: Path
    parent: Optional[int]
    state: FileState = FileState.IN_STACK
    line_counter: int = 0


@dataclass(frozen=True)
class ErrorPolicies:
    unresolvable_quote: ErrorHandling = ErrorHandling.IGNORE
    unresolvable_system: ErrorHandling = ErrorHandling.IGNORE
    cyclic: ErrorHandling = ErrorHandling.ERROR

    @classmethod
    def from_options(
        cls,
        *,
        unresolvable: Optional[ErrorHandling] = None,
        unresolvable_quote: Optional[ErrorHandling] = None,
        unresolvable_system: Optional[ErrorHandling] = None,
        cyclic: Optional[ErrorHandling] = None,
    ) -> 'ErrorPolicies':
        """Fold the combined override into the per-kind selectors."""
        return cls(
            unresolvable_quote=unresolvable or unresolvable_quote or ErrorHandling.IGNORE,
            unresolvable_system=unresolvable or unresolvable_system or ErrorHandling.IGNORE,
            cyclic=cyclic or ErrorHandling.ERROR,
        )

    def for_unresolvable(self, kind: IncludeKind) -> ErrorHandling:
        if kind is IncludeKind.QUOTE:
            return self.unresolvable_quote
        return self.unresolvable_system
