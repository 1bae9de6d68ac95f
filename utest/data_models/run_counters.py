# utest/data_models/run_counters.py
# RunCounters -- the per-module aggregate mutated by every check.

import threading
from dataclasses import dataclass, field


@dataclass
class RunCounters:
    """
    Counters owned by one TestModule for its whole lifetime.

    Fields:
      cases_started    -- Incremented once per case.
      checks_evaluated -- Incremented once per check, whatever its outcome.
      checks_failed    -- Incremented once per failing check.

    Invariant: 0 <= checks_failed <= checks_evaluated. All three values are
    monotonically non-decreasing. Increments hold a lock, so a single
    multi-threaded caller never loses a count; ordering across threads is
    not guaranteed.
    """
    cases_started:    int = 0
    checks_evaluated: int = 0
    checks_failed:    int = 0
    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def start_case(self) -> int:
        with self._lock:
            self.cases_started += 1
            return self.cases_started

    def record_check(self) -> None:
        with self._lock:
            self.checks_evaluated += 1

    def record_failure(self) -> None:
        """Count a failure of the most recently recorded check."""
        with self._lock:
            if self.checks_failed >= self.checks_evaluated:
                raise ValueError(
                    "RunCounters: a failure must follow its recorded check"
                )
            self.checks_failed += 1

    @property
    def passed(self) -> bool:
        return self.checks_failed == 0
