"""API-level framework, services and live test suites."""
