"""Debug functions to summarize parsed results"""

import io
from typing import List

from testngreport.resultdef import Bucket, ParseResults


# Label shown for each bucket in the totals
BUCKET_LABELS = {
    Bucket.PASSED_TEST: 'OK',
    Bucket.FAILED_TEST: 'FAILED',
    Bucket.SKIPPED_TEST: 'SKIPPED',
    Bucket.FAILED_CONFIG: 'FAILED CONFIG',
    Bucket.SKIPPED_CONFIG: 'SKIPPED CONFIG',
}


def show_totals(results: ParseResults, details: bool = False):
    print(''.join(summarize_totals(results, details)))


def summarize_totals(results: ParseResults, details: bool = False) -> List[str]:
    f = io.StringIO()
    print('TESTS:', len(results.tests), file=f)
    for which, label in BUCKET_LABELS.items():
        print(f'{label}:', len(results.bucket(which)), file=f)
    print('TOTAL:', len(results.passed_tests) + len(results.failed_tests)
          + len(results.skipped_tests), file=f)
    if details:
        # Display the methods that didn't pass
        for which in (Bucket.FAILED_CONFIG, Bucket.FAILED_TEST):
            for method in results.bucket(which):
                exc = method.exception.exception_name if method.exception else ''
                print(f'{BUCKET_LABELS[which]} {method.parent_test_name} {method.name} {exc}',
                      file=f)
    f.seek(0)
    return f.readlines()
