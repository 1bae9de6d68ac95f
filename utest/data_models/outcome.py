# utest/data_models/outcome.py
# Three-valued outcome produced by the outcome classifier.

from enum import Enum


class ExceptionStatus(Enum):
    """
    Exception behaviour of one invocation of a unit of work.

      NONE       -- the work returned normally.
      EXPECTED   -- the work raised the designated exception kind.
      UNEXPECTED -- the work raised some other exception.
    """
    NONE       = "none"
    EXPECTED   = "expected"
    UNEXPECTED = "unexpected"
