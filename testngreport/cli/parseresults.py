"""Parses TestNG results files and shows the totals."""

import argparse
import logging
import sys

from testngreport import argparsing
from testngreport import log
from testngreport import sources
from testngreport import summarize
from testngreport.parser import resultsparser


def parse_args(args=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Parse TestNG results files and show the totals')
    argparsing.arguments_logging(parser)
    argparsing.arguments_config(parser)
    parser.add_argument(
        '--console',
        action='store_true',
        help='Write parser progress messages to stderr instead of the log')
    parser.add_argument(
        '--details',
        action='store_true',
        help='Show the methods that failed')
    parser.add_argument(
        'paths',
        nargs='*',
        help='results files, directories holding them, or URLs of them')
    return parser.parse_args(args=args)


def main(args=None) -> int:
    args = parse_args(args)
    log.setup(args, subprogram='parse')
    argparsing.apply_config(args)

    paths = sources.find_results(args.paths)
    logging.info('Parsing %d results files', len(paths))
    parser = resultsparser.ResultsParser(log.ParseLog(sys.stderr) if args.console else None)
    results = parser.parse(paths)

    if args.debug:
        for test in results.tests:
            for cls in test.classes:
                print(f'{test.name} {cls.canonical_name}: {len(cls.methods)} methods')
    summarize.show_totals(results, args.details)
    return 0


if __name__ == '__main__':
    sys.exit(main())
