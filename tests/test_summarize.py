"""Test summarize."""

import unittest

from .context import testngreport  # noqa: F401
from .util import data_file

from testngreport import summarize  # noqa: I100
from testngreport.parser import resultsparser
from testngreport.resultdef import ParseResults


class TestSummarize(unittest.TestCase):

    def test_empty(self):
        self.assertEqual([
            'TESTS: 0\n',
            'OK: 0\n',
            'FAILED: 0\n',
            'SKIPPED: 0\n',
            'FAILED CONFIG: 0\n',
            'SKIPPED CONFIG: 0\n',
            'TOTAL: 0\n',
        ], summarize.summarize_totals(ParseResults()))

    def test_details(self):
        results = resultsparser.ResultsParser().parse([data_file('testng-results.xml'),
                                                       data_file('testng-results-rerun.xml')])
        self.assertEqual([
            'TESTS: 2\n',
            'OK: 3\n',
            'FAILED: 1\n',
            'SKIPPED: 1\n',
            'FAILED CONFIG: 1\n',
            'SKIPPED CONFIG: 1\n',
            'TOTAL: 5\n',
            'FAILED CONFIG Calc tearDown java.lang.IllegalStateException\n',
            'FAILED Calc testDivide java.lang.ArithmeticException\n',
        ], summarize.summarize_totals(results, details=True))
