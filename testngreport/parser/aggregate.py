"""Collects results from all the documents in one parse run."""

from typing import Optional

from testngreport.resultdef import (Bucket, MethodResult, ParseResults, STATUS_FAIL, STATUS_PASS,
                                    STATUS_SKIP, TestResult)


def classify(method: MethodResult) -> Optional[Bucket]:
    """Return the bucket the method belongs in, or None if its status is not recognized.

    Status strings are matched exactly. A passing configuration method is not counted anywhere.
    """
    if method.is_config:
        if method.status == STATUS_FAIL:
            return Bucket.FAILED_CONFIG
        if method.status == STATUS_SKIP:
            return Bucket.SKIPPED_CONFIG
        return None

    if method.status == STATUS_FAIL:
        return Bucket.FAILED_TEST
    if method.status == STATUS_SKIP:
        return Bucket.SKIPPED_TEST
    if method.status == STATUS_PASS:
        return Bucket.PASSED_TEST
    return None


class ResultAggregator:
    """Accumulates methods and tests across documents into one ParseResults."""

    def __init__(self):
        self.results = ParseResults()

    def add_method(self, method: MethodResult) -> Optional[Bucket]:
        which = classify(method)
        if which is not None:
            self.results.bucket(which).append(method)
        return which

    def merge(self, tests: list[TestResult]):
        """Merge one document's tests into the run-wide list."""
        self.results.add_unique_tests(tests)
