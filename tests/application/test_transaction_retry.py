"""Tests for the bounded retry around conflicting units of work."""

import pytest
from protean.exceptions import ExpectedVersionError
from sqlalchemy.exc import OperationalError
from storefront.shared.errors import StoreUnavailable
from storefront.shared.transaction import run_with_retry


class _Flaky:
    def __init__(self, conflicts):
        self.conflicts = conflicts
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.conflicts:
            raise ExpectedVersionError("Wrong expected version")
        return "committed"


class TestRunWithRetry:
    def test_retries_after_version_conflict(self):
        flaky = _Flaky(conflicts=1)
        assert run_with_retry(flaky, label="flaky") == "committed"
        assert flaky.calls == 2

    def test_gives_up_after_configured_attempts(self):
        flaky = _Flaky(conflicts=10)
        with pytest.raises(StoreUnavailable):
            run_with_retry(flaky, label="flaky")
        assert flaky.calls == 3

    def test_store_errors_are_not_retried(self):
        calls = []

        def _broken():
            calls.append(1)
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        with pytest.raises(StoreUnavailable):
            run_with_retry(_broken)
        assert len(calls) == 1

    def test_business_errors_propagate_untouched(self):
        def _reject():
            raise ValueError("bad")

        with pytest.raises(ValueError):
            run_with_retry(_reject)
