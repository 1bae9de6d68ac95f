# utest/data_models/relation.py
# Comparison relations available to relational checks.

import operator
from enum import Enum
from typing import Any, Callable, Dict


class Relation(Enum):
    """
    A binary comparison between two operands.

    The member value is the symbol written into diagnostics.
    """
    EQUAL         = "=="
    NOT_EQUAL     = "!="
    LESS          = "<"
    LESS_EQUAL    = "<="
    GREATER       = ">"
    GREATER_EQUAL = ">="

    @property
    def symbol(self) -> str:
        return self.value

    def holds(self, left: Any, right: Any) -> bool:
        """Apply the relation. The result is coerced with bool()."""
        return bool(_OPERATORS[self](left, right))


_OPERATORS: Dict[Relation, Callable[[Any, Any], Any]] = {
    Relation.EQUAL:         operator.eq,
    Relation.NOT_EQUAL:     operator.ne,
    Relation.LESS:          operator.lt,
    Relation.LESS_EQUAL:    operator.le,
    Relation.GREATER:       operator.gt,
    Relation.GREATER_EQUAL: operator.ge,
}
