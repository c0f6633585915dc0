"""Live API suites (run with --run-external)."""
