# ============================================================================
# READINESS EXECUTOR TESTS
# ============================================================================
# STATUS: Tests - Concurrent readiness evaluation
# PURPOSE: Verify fan-out, deadline, first-failure-wins and observer calls
# CREATED: 19 OCT 2026
# ============================================================================
"""
Readiness Executor Tests

Covers:
1. Empty registry → immediate success
2. Sync and async checks, passing and failing
3. First failure to arrive wins and cancels siblings
4. Readiness timeout and caller deadlines → DeadlineExceeded
5. Error observer invoked exactly once on failure, never on success
6. Registration while an evaluation is in flight
7. One worker thread per sync check, awaitables returned by sync checks
8. Caller cancellation and per-check log context

Run with:
    pytest tests/test_executor.py -v
"""

import asyncio
import logging
import threading
import time

import pytest

from healthcheck import (
    Cancelled,
    CheckContext,
    CheckFunc,
    CheckRegistry,
    ConfigurationError,
    DeadlineExceeded,
    ErrorObserver,
    ReadinessExecutor,
)


class RecordingObserver(ErrorObserver):
    """Observer that records every failure it receives."""

    def __init__(self):
        self.errors = []

    def observe(self, error: BaseException) -> None:
        self.errors.append(error)


def _executor(*checks, **kwargs) -> ReadinessExecutor:
    registry = CheckRegistry()
    for check in checks:
        registry.register(check)
    return ReadinessExecutor(registry=registry, **kwargs)


# ============================================================================
# BASIC OUTCOMES
# ============================================================================

class TestExecuteReady:
    """Pass/fail outcomes of a single evaluation."""

    def test_no_checks(self):
        executor = ReadinessExecutor()
        assert asyncio.run(executor.execute_ready()) is None

    def test_no_checks_ignores_timeout(self):
        executor = ReadinessExecutor(ready_timeout=0.000001)
        assert asyncio.run(executor.execute_ready()) is None

    def test_single_successful_sync_check(self):
        executor = _executor(lambda ctx: None)
        assert asyncio.run(executor.execute_ready()) is None

    def test_single_successful_async_check(self):
        async def ok(ctx: CheckContext) -> None:
            await asyncio.sleep(0)

        executor = _executor(ok)
        assert asyncio.run(executor.execute_ready()) is None

    def test_all_checks_pass(self):
        async def ok_async(ctx):
            await asyncio.sleep(0.01)

        def ok_sync(ctx):
            time.sleep(0.01)

        executor = _executor(ok_async, ok_sync, ok_async, ok_sync)
        assert asyncio.run(executor.execute_ready()) is None

    def test_failing_sync_check(self):
        want = ValueError("failed")

        def failing(ctx):
            raise want

        executor = _executor(lambda ctx: None, failing)

        with pytest.raises(ValueError) as exc_info:
            asyncio.run(executor.execute_ready())
        assert exc_info.value is want

    def test_failing_async_check(self):
        want = RuntimeError("failed")

        async def failing(ctx):
            raise want

        executor = _executor(failing)

        with pytest.raises(RuntimeError) as exc_info:
            asyncio.run(executor.execute_ready())
        assert exc_info.value is want

    def test_checks_run_concurrently(self):
        async def slow(ctx):
            await asyncio.sleep(0.2)

        def slow_sync(ctx):
            time.sleep(0.2)

        executor = _executor(slow, slow, slow, slow_sync, slow_sync)

        start = time.monotonic()
        asyncio.run(executor.execute_ready())
        assert time.monotonic() - start < 0.6

    def test_negative_timeout_rejected(self):
        with pytest.raises(ConfigurationError):
            ReadinessExecutor(ready_timeout=-1)


# ============================================================================
# FIRST FAILURE WINS
# ============================================================================

class TestFirstFailure:
    """The first failure to arrive is the result; siblings are cancelled."""

    def test_failure_does_not_wait_for_siblings(self):
        async def a(ctx):
            await asyncio.sleep(0.001)

        async def b(ctx):
            raise RuntimeError("boom")

        executor = _executor(a, b)

        start = time.monotonic()
        with pytest.raises(RuntimeError, match="boom"):
            asyncio.run(executor.execute_ready())
        assert time.monotonic() - start < 1.0

    def test_first_in_time_not_registration_order(self):
        async def late(ctx):
            await asyncio.sleep(0.3)
            raise RuntimeError("late")

        async def early(ctx):
            raise RuntimeError("early")

        executor = _executor(late, early)

        with pytest.raises(RuntimeError, match="early"):
            asyncio.run(executor.execute_ready())

    def test_failure_cancels_async_siblings(self):
        cancelled = []

        async def sibling(ctx):
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                cancelled.append(True)
                raise

        async def failing(ctx):
            await asyncio.sleep(0.01)
            raise RuntimeError("boom")

        executor = _executor(sibling, failing)

        start = time.monotonic()
        with pytest.raises(RuntimeError):
            asyncio.run(executor.execute_ready())

        assert time.monotonic() - start < 2.0
        # TaskGroup awaited the cancelled sibling before returning
        assert cancelled == [True]

    def test_failure_signals_sync_siblings(self):
        observed = threading.Event()

        def sibling(ctx: CheckContext) -> None:
            if ctx.wait(5):
                observed.set()
                ctx.raise_if_done()

        async def failing(ctx):
            await asyncio.sleep(0.01)
            raise RuntimeError("boom")

        executor = _executor(sibling, failing)

        with pytest.raises(RuntimeError, match="boom"):
            asyncio.run(executor.execute_ready())

        assert observed.wait(2.0)

    def test_sibling_context_reports_cancelled(self):
        seen = []

        def sibling(ctx: CheckContext) -> None:
            ctx.wait(5)
            seen.append(ctx.error)

        async def failing(ctx):
            await asyncio.sleep(0.01)
            raise RuntimeError("boom")

        executor = _executor(sibling, failing)

        with pytest.raises(RuntimeError):
            asyncio.run(executor.execute_ready())

        deadline = time.monotonic() + 2.0
        while not seen and time.monotonic() < deadline:
            time.sleep(0.01)
        assert isinstance(seen[0], Cancelled)


# ============================================================================
# DEADLINES
# ============================================================================

class TestDeadline:
    """Readiness timeout and caller deadlines."""

    def test_timeout_async_check(self):
        async def slow(ctx):
            await asyncio.sleep(0.01)

        executor = _executor(slow, ready_timeout=0.001)

        with pytest.raises(DeadlineExceeded):
            asyncio.run(executor.execute_ready())

    def test_timeout_cooperative_sync_check(self):
        def slow(ctx: CheckContext) -> None:
            if ctx.wait(0.01):
                ctx.raise_if_done()

        executor = _executor(slow, ready_timeout=0.001)

        with pytest.raises(DeadlineExceeded):
            asyncio.run(executor.execute_ready())

    def test_deadline_exceeded_is_timeout_error(self):
        async def slow(ctx):
            await asyncio.sleep(1)

        executor = _executor(slow, ready_timeout=0.01)

        with pytest.raises(TimeoutError):
            asyncio.run(executor.execute_ready())

    def test_zero_timeout_disables_deadline(self):
        async def slow(ctx):
            assert ctx.remaining() is None
            await asyncio.sleep(0.05)

        executor = _executor(slow, ready_timeout=0)
        assert asyncio.run(executor.execute_ready()) is None

    def test_checks_see_bounded_context(self):
        remaining = []

        def check(ctx: CheckContext) -> None:
            remaining.append(ctx.remaining())

        executor = _executor(check, ready_timeout=5.0)
        asyncio.run(executor.execute_ready())

        assert 0 < remaining[0] <= 5.0

    def test_caller_deadline_bounds_evaluation(self):
        async def slow(ctx):
            await asyncio.sleep(1)

        executor = _executor(slow, ready_timeout=10.0)

        async def run():
            caller = CheckContext.background().with_timeout(0.01)
            await executor.execute_ready(caller)

        start = time.monotonic()
        with pytest.raises(DeadlineExceeded):
            asyncio.run(run())
        assert time.monotonic() - start < 0.5

    def test_check_failure_before_deadline_wins(self):
        async def slow(ctx):
            await asyncio.sleep(1)

        async def failing(ctx):
            raise ValueError("boom")

        executor = _executor(slow, failing, ready_timeout=0.5)

        with pytest.raises(ValueError, match="boom"):
            asyncio.run(executor.execute_ready())

    def test_caller_context_released(self):
        caller = CheckContext.background()
        executor = _executor(lambda ctx: None)

        asyncio.run(executor.execute_ready(caller))

        assert caller._children == []
        assert not caller.done()


# ============================================================================
# ERROR OBSERVER
# ============================================================================

class TestErrorObserver:
    """Observer receives the aggregated failure exactly once."""

    def test_observer_called_on_failure(self):
        observer = RecordingObserver()
        want = RuntimeError("caboom")

        def failing(ctx):
            raise want

        executor = _executor(failing, failing, error_observer=observer)

        with pytest.raises(RuntimeError):
            asyncio.run(executor.execute_ready())

        assert len(observer.errors) == 1
        assert observer.errors[0] is want

    def test_observer_not_called_on_success(self):
        observer = RecordingObserver()
        executor = _executor(lambda ctx: None, error_observer=observer)

        asyncio.run(executor.execute_ready())

        assert observer.errors == []

    def test_observer_called_on_deadline(self):
        observer = RecordingObserver()

        async def slow(ctx):
            await asyncio.sleep(1)

        executor = _executor(slow, ready_timeout=0.01, error_observer=observer)

        with pytest.raises(DeadlineExceeded):
            asyncio.run(executor.execute_ready())

        assert len(observer.errors) == 1
        assert isinstance(observer.errors[0], DeadlineExceeded)

    def test_function_observer(self):
        errors = []
        want = RuntimeError("caboom")

        async def failing(ctx):
            raise want

        executor = _executor(failing, error_observer=errors.append)

        with pytest.raises(RuntimeError):
            asyncio.run(executor.execute_ready())

        assert errors == [want]

    def test_failing_observer_keeps_check_failure(self, caplog):
        want = RuntimeError("caboom")

        def broken_observer(error):
            raise ValueError("observer broke")

        async def failing(ctx):
            raise want

        executor = _executor(failing, error_observer=broken_observer)

        with caplog.at_level(logging.ERROR, logger="healthcheck.executor"):
            with pytest.raises(RuntimeError) as exc_info:
                asyncio.run(executor.execute_ready())

        assert exc_info.value is want
        assert "observer broke" in caplog.text


# ============================================================================
# CONCURRENT REGISTRATION
# ============================================================================

class TestConcurrentRegistration:
    """Registration while an evaluation is running."""

    def test_registration_during_evaluation_uses_snapshot(self):
        registry = CheckRegistry()
        executor = ReadinessExecutor(registry=registry)

        def failing(ctx):
            raise RuntimeError("registered late")

        def registering(ctx):
            for _ in range(50):
                registry.register(failing)

        registry.register(registering)

        # The running evaluation does not see the late checks
        asyncio.run(executor.execute_ready())
        assert len(registry) == 51

        # The next evaluation does
        with pytest.raises(RuntimeError, match="registered late"):
            asyncio.run(executor.execute_ready())

    def test_registration_from_threads_during_evaluation(self):
        registry = CheckRegistry()
        executor = ReadinessExecutor(registry=registry)

        async def ok(ctx):
            await asyncio.sleep(0.001)

        def writer():
            for _ in range(200):
                registry.register(CheckFunc(ok))
                time.sleep(0.0005)

        registry.register(ok)
        threads = [threading.Thread(target=writer) for _ in range(4)]
        for thread in threads:
            thread.start()

        try:
            for _ in range(3):
                asyncio.run(executor.execute_ready())
        finally:
            for thread in threads:
                thread.join()

        assert len(registry) == 1 + 4 * 200


# ============================================================================
# SYNC CHECK THREADS
# ============================================================================

class TestSyncCheckThreads:
    """Every sync check gets its own worker thread."""

    def test_many_blocking_checks_run_concurrently(self):
        def slow(ctx):
            time.sleep(0.3)

        executor = _executor(*[slow] * 24, ready_timeout=2.0)

        start = time.monotonic()
        assert asyncio.run(executor.execute_ready()) is None
        assert time.monotonic() - start < 1.5

    def test_stuck_checks_do_not_starve_next_evaluation(self):
        gate = threading.Event()
        first_round = [True]

        def stuck(ctx):
            # Ignores the context on purpose
            if first_round[0]:
                gate.wait(5)

        executor = _executor(*[stuck] * 12, ready_timeout=0.5)

        try:
            with pytest.raises(DeadlineExceeded):
                asyncio.run(executor.execute_ready())

            first_round[0] = False
            assert asyncio.run(executor.execute_ready()) is None
        finally:
            gate.set()
            executor.close()


class TestAwaitableResult:
    """Sync callables returning an awaitable."""

    def test_returned_coroutine_failure(self):
        async def ping(ctx):
            raise RuntimeError("db down")

        executor = _executor(lambda ctx: ping(ctx))

        with pytest.raises(RuntimeError, match="db down"):
            asyncio.run(executor.execute_ready())

    def test_returned_coroutine_success(self):
        calls = []

        async def ping(ctx):
            calls.append(ctx)

        executor = _executor(lambda ctx: ping(ctx))

        assert asyncio.run(executor.execute_ready()) is None
        assert len(calls) == 1


# ============================================================================
# CALLER CANCELLATION
# ============================================================================

class TestCallerCancellation:
    """Cancelling the caller context stops the evaluation."""

    def test_cancel_from_other_thread(self):
        cancelled = []

        async def slow(ctx):
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                cancelled.append(True)
                raise

        executor = _executor(slow, ready_timeout=10.0)
        caller = CheckContext.background().with_cancel()
        timer = threading.Timer(0.05, caller.cancel)
        timer.start()

        start = time.monotonic()
        try:
            with pytest.raises(Cancelled):
                asyncio.run(executor.execute_ready(caller))
        finally:
            timer.cancel()

        assert time.monotonic() - start < 2.0
        assert cancelled == [True]

    def test_already_cancelled_caller(self):
        async def slow(ctx):
            await asyncio.sleep(5)

        executor = _executor(slow)
        caller = CheckContext.background().with_cancel()
        caller.cancel()

        with pytest.raises(Cancelled):
            asyncio.run(executor.execute_ready(caller))


# ============================================================================
# LOGGING
# ============================================================================

class TestCheckLogging:
    """Per-check log records carry the check name."""

    def test_check_name_in_log_context(self, caplog):
        async def database(ctx):
            return None

        executor = _executor(database)

        with caplog.at_level(logging.DEBUG, logger="healthcheck.executor"):
            asyncio.run(executor.execute_ready())

        records = [r for r in caplog.records if "passed" in r.getMessage()]
        assert records[0].extra["check"] == "database"
        assert records[0].extra["component"] == "executor"
