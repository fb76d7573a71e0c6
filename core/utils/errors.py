"""Custom exceptions for core logic."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.templates.models import ParseResult


class TemplateError(Exception):
    """Raised when template placeholders are unsupported in strict mode."""

    def __init__(self, message: str, *, result: ParseResult | None = None) -> None:
        super().__init__(message)
        self.result = result


class InvalidRulePatternError(ValueError):
    """Raised when a rule pattern does not compile at configuration time."""

    def __init__(self, message: str, *, pattern: str) -> None:
        super().__init__(message)
        self.pattern = pattern


class UnknownRuleCodeError(ValueError):
    """Raised when a rule refers to a data type, input type or entity that does not exist."""

    def __init__(self, message: str, *, code: str, kind: str) -> None:
        super().__init__(message)
        self.code = code
        self.kind = kind


class RuleNotFoundError(KeyError):
    """Raised when a rule id is not present in the rule store."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(rule_id)
        self.rule_id = rule_id

    def __str__(self) -> str:
        return f"Rule not found: {self.rule_id}"


class DuplicateCodeError(Exception):
    """Raised by document type sinks when a generated code is already taken."""

    def __init__(self, message: str, *, code: str) -> None:
        super().__init__(message)
        self.code = code
