"""Parses a batch of TestNG results files into a single ParseResults.

Tests with the same name and classes with the same fully-qualified name are merged across
all files in the batch. A file that can't be found or parsed is logged and skipped, and the
rest of the batch is still processed.

Instances are not thread-safe; use a separate ResultsParser for each concurrent batch.
"""

from typing import Iterable, Optional

import requests

from testngreport import config
from testngreport import log
from testngreport import sources
from testngreport.parser import aggregate
from testngreport.parser import builder
from testngreport.parser import statemachine
from testngreport.parser import tokenizer
from testngreport.resultdef import ParseResults


class ResultsParser:
    def __init__(self, parse_log: Optional[log.ParseLog] = None,
                 session: Optional[requests.Session] = None):
        self.log = parse_log if parse_log else log.ParseLog()
        self.session = session

    def parse(self, paths: Optional[Iterable[str]]) -> ParseResults:
        """Parse every results file in paths and return what was found in all of them."""
        if paths is None:
            self.log.message('File paths not specified. Returning empty test results.')
            return ParseResults()

        aggregator = aggregate.ResultAggregator()
        tree = builder.ResultTreeBuilder(aggregator, self.log)
        doc_parser = statemachine.DocumentParser(tree, self.log)
        chunk_size = config.get('read_chunk_bytes')

        for path in paths:
            try:
                with sources.open_source(path, self.session) as f:
                    self.log.message(f"Processing '{path}'")
                    tests, err = doc_parser.process(tokenizer.tokenize(f, chunk_size))
            except sources.SourceNotFound as e:
                self.log.message(str(e))
                continue
            except OSError as e:
                self.log.message(f"Failed to open '{path}'")
                self.log.exception(e)
                continue

            if isinstance(err, tokenizer.TokenizeError):
                self.log.message(f'Failed to parse XML: {err}')
                self.log.exception(err)
            elif err:
                self.log.message(f"Failed to read '{path}'")
                self.log.exception(err)

            # Whatever was completed before an error is kept
            aggregator.merge(tests)

        return aggregator.results
