# utest/harness_version.py
# Harness constants. Single authoritative definition.
# Referenced by the check evaluator, the run aggregator and the script gate.

HARNESS_VERSION: str = "1.0.0"

# Process exit status. Exactly two values are ever produced by a test module.
EXIT_SUCCESS: int = 0
EXIT_FAILURE: int = 1

# Fixed-point digits used when rendering real-valued operands in diagnostics.
DIAGNOSTIC_PRECISION: int = 12
