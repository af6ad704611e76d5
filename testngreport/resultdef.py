"""Type definitions of parsed test results."""

import datetime
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional


# Package name used for classes in the default package
NO_PKG_NAME = 'No Package'

# Method status strings as written in the results file
STATUS_PASS = 'PASS'
STATUS_FAIL = 'FAIL'
STATUS_SKIP = 'SKIP'


class Bucket(IntEnum):
    """Enumeration of the classifications a method invocation can be placed in."""

    FAILED_CONFIG = 1   # configuration method failed
    SKIPPED_CONFIG = 2  # configuration method was skipped
    FAILED_TEST = 3     # test method failed
    SKIPPED_TEST = 4    # test method was skipped
    PASSED_TEST = 5     # test method succeeded


@dataclass
class MethodException:
    """Exception thrown by a test or configuration method."""

    exception_name: Optional[str]
    message: Optional[str] = None
    short_stacktrace: Optional[str] = None
    full_stacktrace: Optional[str] = None


@dataclass
class MethodResult:
    """Class to hold the result of a single invocation of a test or configuration method."""

    name: str
    status: Optional[str]                   # PASS, FAIL or SKIP (anything else is unclassified)
    description: Optional[str]
    duration: int                           # duration in milliseconds
    start_time: Optional[datetime.datetime]  # None if unknown
    is_config: bool
    test_run_id: Optional[str]              # shared by all methods in one pass of a class
    parent_test_name: Optional[str]
    parent_suite_name: Optional[str]
    test_instance_name: Optional[str] = None
    parameters: list[str] = field(default_factory=list)
    exception: Optional[MethodException] = None
    groups: list[str] = field(default_factory=list)
    reporter_output: Optional[str] = None


@dataclass(eq=False)
class ClassResult:
    """All the method invocations seen for one class.

    There is only ever one of these per fully-qualified class name in a parse run, so it is
    compared by identity.
    """

    pkgname: str
    name: str
    methods: list[MethodResult] = field(default_factory=list)

    @property
    def canonical_name(self) -> str:
        """Return the fully-qualified class name."""
        if self.pkgname == NO_PKG_NAME:
            return self.name
        return f'{self.pkgname}.{self.name}'

    def add_methods(self, methods: list[MethodResult]):
        self.methods.extend(methods)


@dataclass(eq=False)
class TestResult:
    """All the classes seen for one <test> name."""
    __test__ = False

    name: str
    classes: list[ClassResult] = field(default_factory=list)

    def add_classes(self, classes: list[ClassResult]):
        self.classes.extend(classes)


@dataclass
class ParseResults:
    """Aggregate of everything found in one parse run."""

    tests: list[TestResult] = field(default_factory=list)
    failed_configs: list[MethodResult] = field(default_factory=list)
    skipped_configs: list[MethodResult] = field(default_factory=list)
    failed_tests: list[MethodResult] = field(default_factory=list)
    skipped_tests: list[MethodResult] = field(default_factory=list)
    passed_tests: list[MethodResult] = field(default_factory=list)

    def bucket(self, which: Bucket) -> list[MethodResult]:
        """Return the list of methods for the given classification."""
        return {
            Bucket.FAILED_CONFIG: self.failed_configs,
            Bucket.SKIPPED_CONFIG: self.skipped_configs,
            Bucket.FAILED_TEST: self.failed_tests,
            Bucket.SKIPPED_TEST: self.skipped_tests,
            Bucket.PASSED_TEST: self.passed_tests,
        }[which]

    def add_unique_tests(self, tests: list[TestResult]):
        """Add tests to the list, skipping those that are already there.

        A test seen again is the same object, already extended in place, so it needs no
        further merging.
        """
        for test in tests:
            if not any(t is test for t in self.tests):
                self.tests.append(test)
