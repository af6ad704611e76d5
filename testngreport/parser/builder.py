"""Builds the test -> class -> method result tree as tags in a results file close.

Tests are unique by name and classes by fully-qualified name for the whole parse run, so
the same objects are handed out again whenever a name is seen a second time and new
children are appended to them.
"""

from typing import Optional

from testngreport import log
from testngreport.parser import aggregate
from testngreport.resultdef import ClassResult, MethodResult, NO_PKG_NAME, TestResult


def split_class_name(fqname: str) -> tuple[str, str]:
    """Split a fully-qualified class name into its package and simple names."""
    pkgname, dot, name = fqname.rpartition('.')
    if not dot:
        return (NO_PKG_NAME, fqname)
    return (pkgname, name)


class ResultTreeBuilder:
    """Owns the tables of tests and classes seen in one parse run."""

    def __init__(self, aggregator: aggregate.ResultAggregator,
                 parse_log: Optional[log.ParseLog] = None):
        self.aggregator = aggregator
        self.log = parse_log if parse_log else log.ParseLog()
        self.tests = {}    # type: dict[str, TestResult]
        self.classes = {}  # type: dict[str, ClassResult]

    def test_for(self, name: str) -> TestResult:
        """Return the test with this name, creating it the first time."""
        test = self.tests.get(name)
        if test is None:
            test = TestResult(name)
            self.tests[name] = test
        return test

    def class_for(self, fqname: str) -> ClassResult:
        """Return the class with this fully-qualified name, creating it the first time.

        The package name is split off only on creation and never recomputed.
        """
        cls = self.classes.get(fqname)
        if cls is None:
            pkgname, name = split_class_name(fqname)
            cls = ClassResult(pkgname, name)
            self.classes[fqname] = cls
        return cls

    def finish_method(self, method: MethodResult, pending_methods: Optional[list[MethodResult]]):
        """Classify a completed method and add it to the class being built."""
        self.aggregator.add_method(method)
        if pending_methods is None:
            self.log.message(f'Method {method.name} found outside of a class; not attached to any')
            return
        pending_methods.append(method)

    def finish_class(self, cls: ClassResult, methods: list[MethodResult],
                     pending_classes: Optional[list[ClassResult]]):
        """Attach the methods found in one <class> and add it to the test being built."""
        cls.add_methods(methods)
        if pending_classes is None:
            self.log.message(
                f'Class {cls.canonical_name} found outside of a test; not attached to any')
            return
        pending_classes.append(cls)

    def finish_test(self, test: TestResult, classes: list[ClassResult],
                    output: list[TestResult]):
        """Attach the classes found in one <test> and add it to the document's output."""
        test.add_classes(classes)
        output.append(test)
