"""
Metrics for shapeguard.

Counts validations, failures and error codes, and tracks latency. Shared
between worker threads by the batch validator, so every mutation takes a
lock.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Dict

from shapeguard.core.result import Result


@dataclass
class ValidationMetrics:
    """
    Thread-safe validation counters.

    Example:
        >>> metrics = ValidationMetrics()
        >>> for result in validate_stream(schema, rows, metrics=metrics):
        ...     pass
        >>> metrics.success_rate
        0.75
    """

    total_validations: int = 0
    successful_validations: int = 0
    failed_validations: int = 0
    total_errors: int = 0
    errors_by_code: Dict[str, int] = field(default_factory=dict)

    total_latency_ms: float = 0.0

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def avg_latency_ms(self) -> float:
        """Average validation latency in milliseconds."""
        with self._lock:
            if self.total_validations == 0:
                return 0.0
            return self.total_latency_ms / self.total_validations

    @property
    def success_rate(self) -> float:
        """Share of validations that succeeded (0.0 to 1.0)."""
        with self._lock:
            if self.total_validations == 0:
                return 0.0
            return self.successful_validations / self.total_validations

    def record_validation(self, result: Result, latency_ms: float) -> None:
        """Record the outcome of one validation."""
        with self._lock:
            self.total_validations += 1
            self.total_latency_ms += latency_ms
            if result.is_ok():
                self.successful_validations += 1
                return
            self.failed_validations += 1
            for error in result.error:
                self.total_errors += 1
                self.errors_by_code[error.code] = self.errors_by_code.get(error.code, 0) + 1

    def reset(self) -> None:
        """Reset all counters to zero."""
        with self._lock:
            self.total_validations = 0
            self.successful_validations = 0
            self.failed_validations = 0
            self.total_errors = 0
            self.errors_by_code = {}
            self.total_latency_ms = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Export metrics as a dictionary."""
        with self._lock:
            total = self.total_validations
            return {
                "total_validations": total,
                "successful_validations": self.successful_validations,
                "failed_validations": self.failed_validations,
                "total_errors": self.total_errors,
                "errors_by_code": dict(self.errors_by_code),
                "avg_latency_ms": self.total_latency_ms / total if total else 0.0,
                "success_rate": self.successful_validations / total if total else 0.0,
            }
