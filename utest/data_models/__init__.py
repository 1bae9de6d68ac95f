# utest/data_models/__init__.py

from utest.data_models.outcome import ExceptionStatus
from utest.data_models.relation import Relation
from utest.data_models.run_counters import RunCounters
from utest.data_models.source_location import (
    SourceLocation,
    call_argument_text,
    caller_location,
    split_arguments,
)

__all__ = [
    "ExceptionStatus",
    "Relation",
    "RunCounters",
    "SourceLocation",
    "call_argument_text",
    "caller_location",
    "split_arguments",
]
