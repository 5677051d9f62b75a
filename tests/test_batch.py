"""Tests for batch validation."""

import asyncio
import threading
import time

import pytest

from shapeguard.batch import BatchResult, BatchValidator
from shapeguard.config import Config
from shapeguard.core.result import Ok
from shapeguard.metrics import ValidationMetrics
from shapeguard.schema import define


@pytest.fixture
def schema():
    return define([("name", "string"), ("age", "integer", {"gteq": 0})])


class TestBatchValidator:
    """Tests for BatchValidator construction."""

    def test_defaults(self, schema):
        validator = BatchValidator(schema)

        assert validator.schema is schema
        assert validator.max_concurrent == 5
        assert validator.metrics is None

    def test_accepts_concurrency(self, schema):
        assert BatchValidator(schema, max_concurrent=2).max_concurrent == 2

    def test_rejects_zero_concurrency(self, schema):
        with pytest.raises(ValueError):
            BatchValidator(schema, max_concurrent=0)

    def test_process_is_coroutine(self, schema):
        assert asyncio.iscoroutinefunction(BatchValidator(schema).process)

    def test_from_config(self, schema):
        config = Config(coerce=True, strict=True, max_concurrent=3)
        validator = BatchValidator.from_config(schema, config)

        assert validator.max_concurrent == 3
        assert validator.validate_options == {"coerce": True, "debug": False, "strict": True}


class TestBatchResult:
    """Tests for BatchResult."""

    def test_success(self):
        assert BatchResult(index=0, data={"a": 1}, errors=[]).success is True

    def test_failure(self, schema):
        errors = schema.validate({}).error
        assert BatchResult(index=2, data=None, errors=errors).success is False


@pytest.mark.asyncio
class TestBatchProcessing:
    """Tests for concurrent processing."""

    async def test_results_keep_input_order(self, schema):
        items = [{"name": f"user{i}", "age": i} for i in range(20)]
        results = await BatchValidator(schema, max_concurrent=4).process(items)

        assert [r.index for r in results] == list(range(20))
        assert [r.data["age"] for r in results] == list(range(20))

    async def test_index_attribution(self, schema):
        """Only the invalid item fails, with its index in every error path."""
        items = [{"name": "a", "age": 1}, {"name": "b", "age": -1}, {"name": "c", "age": 3}]
        results = await BatchValidator(schema).process(items)

        assert [r.success for r in results] == [True, False, True]
        assert results[1].data is None
        assert results[1].errors[0].path == (1, "age")
        assert results[1].errors[0].code == "gteq"

    async def test_validate_options(self, schema):
        results = await BatchValidator(schema, coerce=True).process([{"name": "a", "age": "7"}])
        assert results[0].data == {"name": "a", "age": 7}

    async def test_progress_callback(self, schema):
        progress = []
        items = [{"name": "a", "age": 1}] * 5

        await BatchValidator(schema, max_concurrent=2).process(
            items, on_progress=lambda done, total: progress.append((done, total))
        )

        assert sorted(progress) == [(1, 5), (2, 5), (3, 5), (4, 5), (5, 5)]

    async def test_empty_batch(self, schema):
        assert await BatchValidator(schema).process([]) == []

    async def test_records_metrics(self, schema):
        metrics = ValidationMetrics()
        items = [{"name": "a", "age": 1}, {"age": "x"}, {"name": "c", "age": 2}]

        await BatchValidator(schema, metrics=metrics).process(items)

        assert metrics.total_validations == 3
        assert metrics.successful_validations == 2
        assert metrics.errors_by_code == {"required": 1}

    async def test_concurrency_limit(self):
        """No more than max_concurrent validations run at once."""
        running = 0
        peak = 0
        lock = threading.Lock()

        def slow_hook(data):
            nonlocal running, peak
            with lock:
                running += 1
                peak = max(peak, running)
            time.sleep(0.01)
            with lock:
                running -= 1
            return Ok(data)

        schema = define([("n", "integer")], post_validate=slow_hook)
        await BatchValidator(schema, max_concurrent=2).process([{"n": i} for i in range(8)])

        assert peak <= 2
