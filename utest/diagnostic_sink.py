# utest/diagnostic_sink.py
# DiagnosticSink -- the text stream every diagnostic and summary goes to.
#
# No logging module. Output is plain lines on a text stream, stdout by
# default, flushed after every line so diagnostics stay ordered relative to
# anything the code under test prints.

import numbers
import sys
from typing import Any, Optional, TextIO

from utest.data_models.source_location import SourceLocation
from utest.harness_version import DIAGNOSTIC_PRECISION


class DiagnosticSink:
    """
    Line-oriented wrapper around a text stream.

    When constructed without a stream, sys.stdout is looked up on every
    write so that redirection installed after construction is honoured.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def write_line(self, text: str) -> None:
        stream = self.stream
        stream.write(text + "\n")
        stream.flush()

    def flush(self) -> None:
        self.stream.flush()


def format_value(value: Any) -> str:
    """
    Render one operand for a diagnostic.

    Real non-integral numbers use fixed-point notation with
    DIAGNOSTIC_PRECISION digits. Integers, booleans and everything else use
    str().
    """
    if isinstance(value, numbers.Integral):
        return str(value)
    if isinstance(value, numbers.Real):
        return f"{float(value):.{DIAGNOSTIC_PRECISION}f}"
    return str(value)


def format_diagnostic(
    location:    SourceLocation,
    module_name: str,
    case_name:   str,
    message:     str,
) -> str:
    """Return `<file>:<line>: [<module>/<case>]: <message>`."""
    return (
        f"{location.filename}:{location.lineno}: "
        f"[{module_name}/{case_name}]: {message}"
    )
