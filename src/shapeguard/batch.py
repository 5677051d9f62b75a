"""
Batch validation for shapeguard.

Validates many inputs concurrently. Each input is independent, so work is
spread over worker threads with a bounded number in flight; results always
come back in input order.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from shapeguard.config import Config
from shapeguard.errors import ValidationError
from shapeguard.metrics import ValidationMetrics
from shapeguard.schema import Schema
from shapeguard.validator import validate


@dataclass
class BatchResult:
    """
    Result of validating one input of a batch.

    Attributes:
        index: Original index in the batch.
        data: The validated dict (None if validation failed).
        errors: Validation errors (empty on success).
    """

    index: int
    data: Optional[Dict[str, Any]]
    errors: List[ValidationError]

    @property
    def success(self) -> bool:
        """Whether this input was valid."""
        return not self.errors


class BatchValidator:
    """
    Validate many inputs concurrently against one schema.

    Example:
        >>> validator = BatchValidator(schema, max_concurrent=5, coerce=True)
        >>> results = asyncio.run(validator.process(rows))
        >>> [r.index for r in results if not r.success]
        [1]
    """

    def __init__(
        self,
        schema: Schema,
        max_concurrent: int = 5,
        metrics: Optional[ValidationMetrics] = None,
        **validate_options: Any,
    ) -> None:
        """
        Initialize the batch validator.

        Args:
            schema: The schema every input is validated against.
            max_concurrent: Maximum validations in flight (default: 5).
            metrics: Optional metrics collector.
            **validate_options: Passed to ``validate`` (``coerce``, ``strict``).

        Raises:
            ValueError: If max_concurrent is not positive.
        """
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")

        self.schema = schema
        self.max_concurrent = max_concurrent
        self.metrics = metrics
        self.validate_options = validate_options

    @classmethod
    def from_config(
        cls,
        schema: Schema,
        config: Config,
        metrics: Optional[ValidationMetrics] = None,
    ) -> "BatchValidator":
        """Create a batch validator using settings from a Config."""
        return cls(
            schema,
            max_concurrent=config.max_concurrent,
            metrics=metrics,
            **config.validation_options(),
        )

    def _validate_one(self, index: int, item: Any) -> BatchResult:
        started = time.perf_counter()
        options = dict(self.validate_options)
        options["path"] = (index,) + tuple(options.get("path", ()))
        result = validate(self.schema, item, **options)

        if self.metrics is not None:
            self.metrics.record_validation(result, (time.perf_counter() - started) * 1000.0)

        if result.is_ok():
            return BatchResult(index=index, data=result.value, errors=[])
        return BatchResult(index=index, data=None, errors=list(result.error))

    async def process(
        self,
        items: Sequence[Any],
        on_progress: Optional[Callable[[int, int], None]] = None,
    ) -> List[BatchResult]:
        """
        Validate every item concurrently.

        Args:
            items: Inputs to validate.
            on_progress: Callback called with (completed, total) after each item.

        Returns:
            List of BatchResult objects in original order.
        """
        semaphore = asyncio.Semaphore(self.max_concurrent)
        results: List[Optional[BatchResult]] = [None] * len(items)
        completed_count = 0
        counter_lock = asyncio.Lock()

        async def process_one(index: int, item: Any) -> None:
            nonlocal completed_count
            async with semaphore:
                results[index] = await asyncio.to_thread(self._validate_one, index, item)
            async with counter_lock:
                completed_count += 1
                current_count = completed_count
            if on_progress:
                on_progress(current_count, len(items))

        await asyncio.gather(*(process_one(i, item) for i, item in enumerate(items)))

        return [r for r in results if r is not None]
