from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional


@dataclass(frozen=True)
class RuleResult:
    """
    Result of a single layout check.
    """
    rule_id: str
    passed: bool
    message: str
    metrics: dict[str, Any] | None = None


@dataclass(frozen=True)
class ValidationReport:
    """
    Collection of layout check results for one sheet.
    """
    passed: bool
    results: list[RuleResult]

    @classmethod
    def from_results(cls, results: List[RuleResult]) -> "ValidationReport":
        return cls(passed=all(r.passed for r in results), results=list(results))

    def find(self, rule_id: str) -> Optional[RuleResult]:
        for r in self.results:
            if r.rule_id == rule_id:
                return r
        return None

    def failures(self) -> list[RuleResult]:
        return [r for r in self.results if not r.passed]
