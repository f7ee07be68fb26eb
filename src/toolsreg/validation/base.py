"""Core validation data structures."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping


@dataclass(frozen=True)
class Violation:
    """A single validation failure, located by category and tool."""

    category: str
    tool: str
    message: str

    def render(self) -> str:
        return f"ERROR in {self.category}/{self.tool}: {self.message}"


@dataclass
class ValidationReport:
    """Accumulated outcome of validating every configured category."""

    violations: List[Violation] = field(default_factory=list)
    categories_checked: int = 0
    tools_checked: int = 0
    unused_tokens: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.violations

    def extend(self, violations: Iterable[Violation]) -> None:
        self.violations.extend(violations)

    def by_category(self) -> Dict[str, List[Violation]]:
        grouped: Dict[str, List[Violation]] = defaultdict(list)
        for violation in self.violations:
            grouped[violation.category].append(violation)
        return dict(grouped)


def tool_label(record: Any, index: int) -> str:
    """Name a record for error messages: its name, else its id, else its position."""
    if isinstance(record, Mapping):
        for key in ("name", "id"):
            value = record.get(key)
            if isinstance(value, str) and value:
                return value
    return f"#{index}"
