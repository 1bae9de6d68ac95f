# usage_example.py
# Minimal usage example for the utest harness.
# This file is not part of the utest package. For reference only.
#
#   python usage_example.py ; echo $?

import numpy as np

from utest import main


def parse_ratio(text: str) -> float:
    numerator, denominator = text.split("/")
    return int(numerator) / int(denominator)


def body(m):
    m.case("arithmetic")
    m.check_equal(2 + 2, 4)
    m.check_less(1, 2)
    m.check_close(0.1 + 0.2, 0.3, 1e-12)

    m.case("parsing")
    m.require(parse_ratio("1/4") == 0.25)        # aborts the run if false
    m.check_throw(lambda: parse_ratio("1/0"), ZeroDivisionError)
    m.check_throw(lambda: parse_ratio("x"), ValueError)
    m.check_nothrow(lambda: parse_ratio("3/4"))

    m.case("arrays")
    m.check_array_close(np.linspace(0.0, 1.0, 5), [0.0, 0.25, 0.5, 0.75, 1.0], 1e-12)


if __name__ == "__main__":
    main("usage_example", body)

# Expected output:
# running test case [usage_example/arithmetic] ...
# running test case [usage_example/parsing] ...
# running test case [usage_example/arrays] ...
#   no errors detected in 9 checks.
#
# Changing `m.check_equal(2 + 2, 4)` to `m.check_equal(2 + 2, 5)` prints
#   /path/to/usage_example.py:19: [usage_example/arithmetic]: check {2 + 2 == 5} failed {4 == 5}!
# and ends with
#   failed with 1 errors in 9 checks!
# and exit status 1.
