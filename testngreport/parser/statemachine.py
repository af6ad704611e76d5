"""Walks the tokens of one TestNG results document.

The document is never turned into a tree. Instead, each start and end tag is dispatched to a
handler that updates the explicit parse state: which suite, group, test, class and method are
open, the children collected for each of them so far, and which leaf element any CDATA text
belongs to. Finished methods, classes and tests are handed to the ResultTreeBuilder as their
end tags are seen.

The results format looks like this (only the interesting parts are shown):

  <testng-results>
    <suite name="...">
      <groups>
        <group name="...">
          <method name="..." class="..."/>
        </group>
      </groups>
      <test name="...">
        <class name="pkg.Class">
          <test-method status="PASS" name="..." is-config="true" duration-ms="..."
                       started-at="2010-06-30T15:22:53Z" description="..."
                       test-instance-name="...">
            <params><param index="0"><value><![CDATA[...]]></value></param></params>
            <exception class="...">
              <message><![CDATA[...]]></message>
              <short-stacktrace><![CDATA[...]]></short-stacktrace>
              <full-stacktrace><![CDATA[...]]></full-stacktrace>
            </exception>
            <reporter-output><line><![CDATA[...]]></line></reporter-output>
          </test-method>
        </class>
      </test>
    </suite>
  </testng-results>
"""

import datetime
import enum
import re
import uuid
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from testngreport import log
from testngreport.parser import builder
from testngreport.parser.tokenizer import Token, TokenizeError, TokenKind
from testngreport.resultdef import ClassResult, MethodException, MethodResult, TestResult


# Format of the started-at attribute; anything after this (like a time zone) is ignored
DATE_FORMAT = '%Y-%m-%dT%H:%M:%S'
DATE_LEN = len('yyyy-mm-ddThh:mm:ss')

# Appended to every line of reporter output
LINE_BREAK = '<br/>'

# Characters replaced when escaping a line of reporter output
ESCAPES = str.maketrans({
    '\n': '<br>',
    '<': '&lt;',
    '>': '&gt;',
    '&': '&amp;',
    '"': '&quot;',
    "'": '&#039;',
})

# A space followed by another space
SPACE_RUN_RE = re.compile(r' (?= )')


class TextSink(enum.Enum):
    """The leaf element that CDATA text is currently routed to.

    Only one can be active at a time since these elements never nest.
    """

    NONE = 0
    PARAMS = 1
    MESSAGE = 2
    SHORT_STACKTRACE = 3
    FULL_STACKTRACE = 4
    LINE = 5


@dataclass
class ParseState:
    """Everything that is open while walking one document."""

    suite_name: Optional[str] = None
    group_name: Optional[str] = None
    # 'class|method' -> names of the groups the method is in
    method_groups: dict[str, list[str]] = field(default_factory=dict)

    test: Optional[TestResult] = None
    classes: Optional[list[ClassResult]] = None  # found so far in the open test
    cls: Optional[ClassResult] = None
    methods: Optional[list[MethodResult]] = None  # found so far in the open class
    test_run_id: Optional[str] = None
    method: Optional[MethodResult] = None
    params: Optional[list[str]] = None

    exception_name: Optional[str] = None
    message: Optional[str] = None
    short_stacktrace: Optional[str] = None
    full_stacktrace: Optional[str] = None

    line: Optional[str] = None
    reporter_output: Optional[list[str]] = None

    text_sink: TextSink = TextSink.NONE

    # Tests completed in this document
    output: list[TestResult] = field(default_factory=list)


def group_key(class_name: Optional[str], method_name: Optional[str]) -> str:
    """Return the key used to look up the groups of a method in a class."""
    return f'{class_name}|{method_name}'


def parse_start_time(started_at: Optional[str]) -> Optional[datetime.datetime]:
    """Parse the started-at attribute, raising ValueError if it can't be."""
    if not started_at:
        raise ValueError('missing time')
    return datetime.datetime.strptime(started_at[:DATE_LEN], DATE_FORMAT)


def parse_duration(duration: Optional[str]) -> int:
    """Return the duration-ms attribute as an integer, or 0 if it is missing or invalid."""
    try:
        return int(duration)
    except (TypeError, ValueError):
        return 0


def escape(text: str) -> str:
    """Escape a line of text for display in HTML.

    Newlines become line breaks, and every space in a run of spaces but the last becomes a
    non-breaking space so the spacing survives while the text can still wrap.
    """
    return SPACE_RUN_RE.sub('&nbsp;', text.translate(ESCAPES))


class DocumentParser:
    """Turns the tokens of results documents into TestResult trees.

    The same object can be used for several documents in turn; a fresh ParseState is used for
    each one, while the builder's test and class tables are shared among all of them.
    """

    def __init__(self, tree: builder.ResultTreeBuilder, parse_log: Optional[log.ParseLog] = None):
        self.tree = tree
        self.log = parse_log if parse_log else log.ParseLog()
        self.state = ParseState()

        self.enter_handlers = {
            'suite': self.start_suite,
            'groups': self.start_groups,
            'group': self.start_group,
            'method': self.start_group_method,
            'test': self.start_test,
            'class': self.start_class,
            'test-method': self.start_test_method,
            'params': self.start_params,
            'exception': self.start_exception,
            'message': self.start_message,
            'short-stacktrace': self.start_short_stacktrace,
            'full-stacktrace': self.start_full_stacktrace,
            'reporter-output': self.start_reporter_output,
            'line': self.start_line,
        }  # type: dict[str, Callable[[dict[str, str]], None]]

        self.exit_handlers = {
            'suite': self.finish_suite,
            'group': self.finish_group,
            'test': self.finish_test,
            'class': self.finish_class,
            'test-method': self.finish_test_method,
            'params': self.finish_params,
            'exception': self.finish_exception,
            'message': self.finish_text,
            'short-stacktrace': self.finish_text,
            'full-stacktrace': self.finish_text,
            'reporter-output': self.finish_reporter_output,
            'line': self.finish_line,
        }  # type: dict[str, Callable[[], None]]

        self.text_handlers = {
            TextSink.PARAMS: self.text_param,
            TextSink.MESSAGE: self.text_message,
            TextSink.SHORT_STACKTRACE: self.text_short_stacktrace,
            TextSink.FULL_STACKTRACE: self.text_full_stacktrace,
            TextSink.LINE: self.text_line,
        }  # type: dict[TextSink, Callable[[str], None]]

    def process(self, tokens: Iterable[Token]) -> tuple[list[TestResult], Optional[Exception]]:
        """Walk through one document.

        Returns the tests completed in the document and the error that stopped processing
        early, if any. Tests completed before an error are still returned.
        """
        self.state = ParseState()
        err = None
        try:
            for token in tokens:
                self.handle_token(token)
        except (TokenizeError, OSError) as e:
            err = e
        output = self.state.output
        self.state = ParseState()
        return (output, err)

    def handle_token(self, token: Token):
        if token.kind == TokenKind.START:
            if handler := self.enter_handlers.get(token.name):
                handler(token.attrs)
        elif token.kind == TokenKind.END:
            if handler := self.exit_handlers.get(token.name):
                handler()
        elif token.kind == TokenKind.TEXT:
            if handler := self.text_handlers.get(self.state.text_sink):
                handler(token.text)

    # Suites and groups

    def start_suite(self, attrs: dict[str, str]):
        self.state.suite_name = attrs.get('name')

    def finish_suite(self):
        self.state.method_groups.clear()
        self.state.suite_name = None

    def start_groups(self, attrs: dict[str, str]):
        self.state.method_groups = {}

    def start_group(self, attrs: dict[str, str]):
        self.state.group_name = attrs.get('name')

    def finish_group(self):
        self.state.group_name = None

    def start_group_method(self, attrs: dict[str, str]):
        if self.state.group_name is None:
            return
        key = group_key(attrs.get('class'), attrs.get('name'))
        self.state.method_groups.setdefault(key, []).append(self.state.group_name)

    # Tests, classes and methods

    def start_test(self, attrs: dict[str, str]):
        self.state.test = self.tree.test_for(attrs.get('name'))
        self.state.classes = []

    def finish_test(self):
        if self.state.test is None:
            return
        self.tree.finish_test(self.state.test, self.state.classes, self.state.output)
        self.state.test = None
        self.state.classes = None

    def start_class(self, attrs: dict[str, str]):
        self.state.cls = self.tree.class_for(attrs.get('name', ''))
        self.state.methods = []
        self.state.test_run_id = str(uuid.uuid4())

    def finish_class(self):
        if self.state.cls is None:
            return
        self.tree.finish_class(self.state.cls, self.state.methods, self.state.classes)
        self.state.cls = None
        self.state.methods = None
        self.state.test_run_id = None

    def start_test_method(self, attrs: dict[str, str]):
        started_at = attrs.get('started-at')
        try:
            start_time = parse_start_time(started_at)
        except ValueError:
            self.log.message(f'Unable to parse started-at value: {started_at}')
            start_time = None

        name = attrs.get('name')
        self.state.method = MethodResult(
            name=name,
            status=attrs.get('status'),
            description=attrs.get('description'),
            duration=parse_duration(attrs.get('duration-ms')),
            start_time=start_time,
            is_config=attrs.get('is-config', '').lower() == 'true',
            test_run_id=self.state.test_run_id,
            parent_test_name=self.state.test.name if self.state.test else None,
            parent_suite_name=self.state.suite_name,
            test_instance_name=attrs.get('test-instance-name'))

        if self.state.cls is not None:
            groups = self.state.method_groups.get(
                group_key(self.state.cls.canonical_name, name))
            if groups:
                self.state.method.groups = list(groups)

    def finish_test_method(self):
        if self.state.method is None:
            return
        self.tree.finish_method(self.state.method, self.state.methods)
        self.state.method = None

    # Method children

    def start_params(self, attrs: dict[str, str]):
        self.state.params = []
        self.state.text_sink = TextSink.PARAMS

    def finish_params(self):
        if self.state.method is not None:
            self.state.method.parameters = self.state.params
        else:
            self.log.message('Parameters found outside of a test method')
        self.state.params = None
        self.state.text_sink = TextSink.NONE

    def start_exception(self, attrs: dict[str, str]):
        self.state.exception_name = attrs.get('class')

    def finish_exception(self):
        exc = MethodException(self.state.exception_name, self.state.message,
                              self.state.short_stacktrace, self.state.full_stacktrace)
        if self.state.method is not None:
            self.state.method.exception = exc
        else:
            self.log.message(
                f'Exception {exc.exception_name} found outside of a test method')
        self.state.exception_name = None
        self.state.message = None
        self.state.short_stacktrace = None
        self.state.full_stacktrace = None

    def start_message(self, attrs: dict[str, str]):
        self.state.text_sink = TextSink.MESSAGE

    def start_short_stacktrace(self, attrs: dict[str, str]):
        self.state.text_sink = TextSink.SHORT_STACKTRACE

    def start_full_stacktrace(self, attrs: dict[str, str]):
        self.state.text_sink = TextSink.FULL_STACKTRACE

    def finish_text(self):
        self.state.text_sink = TextSink.NONE

    def start_reporter_output(self, attrs: dict[str, str]):
        # Suite-level reporter output is not captured
        pass

    def finish_reporter_output(self):
        method = self.state.method
        # Output from configuration methods is dropped
        if method is not None and not method.is_config and self.state.reporter_output is not None:
            method.reporter_output = ''.join(self.state.reporter_output)
        self.state.reporter_output = None

    def start_line(self, attrs: dict[str, str]):
        if self.state.method is not None and self.state.reporter_output is None:
            self.state.reporter_output = []
        # A line without any text is empty rather than a repeat of the previous one
        self.state.line = None
        self.state.text_sink = TextSink.LINE

    def finish_line(self):
        if self.state.method is not None and self.state.reporter_output is not None:
            self.state.reporter_output.append(escape(self.state.line or '') + LINE_BREAK)
        self.state.line = None
        self.state.text_sink = TextSink.NONE

    # CDATA handlers

    def text_param(self, text: str):
        if self.state.params is not None:
            self.state.params.append(text)

    def text_message(self, text: str):
        self.state.message = text

    def text_short_stacktrace(self, text: str):
        self.state.short_stacktrace = text

    def text_full_stacktrace(self, text: str):
        self.state.full_stacktrace = text

    def text_line(self, text: str):
        self.state.line = text
