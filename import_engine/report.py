"""
import_engine.report - Structured result of a bulk donation import.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ImportResult:
    total_rows: int = 0
    success_count: int = 0
    failure_count: int = 0
    errors: list[str] = field(default_factory=list)   # ["Row N: reason"]

    def add_error(self, row: int, reason: str, count: bool = True):
        """Record "Row N: reason"; count=False leaves failure_count alone."""
        self.errors.append(f"Row {row}: {reason}")
        if count:
            self.failure_count += 1

    @property
    def all_failed(self) -> bool:
        return self.failure_count > 0 and self.success_count == 0

    def to_dict(self) -> dict:
        return {
            "totalRows": self.total_rows,
            "successCount": self.success_count,
            "failureCount": self.failure_count,
            "errors": list(self.errors),
        }
