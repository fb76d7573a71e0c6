"""Data models for placeholder extraction."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Occurrence:
    """One ``{{key}}`` token found in a paragraph."""

    placeholder: str
    paragraph_path: str
    start: int
    end: int


@dataclass(frozen=True)
class UnsupportedOccurrence:
    """A placeholder-like token that cannot be classified."""

    kind: str
    text: str
    paragraph_path: str
    start: int


@dataclass
class ParseResult:
    """Placeholder extraction output.

    ``placeholders`` holds unique raw tokens in document order.
    """

    placeholders: list[str] = field(default_factory=list)
    occurrences: list[Occurrence] = field(default_factory=list)
    unsupported: list[UnsupportedOccurrence] = field(default_factory=list)

    @property
    def keys(self) -> list[str]:
        return [token[2:-2] for token in self.placeholders]
