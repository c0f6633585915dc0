"""
API test kit package.

This package keeps the framework, services and test suites importable to support:
  - IDE navigation
  - programmatic use from other suites
  - CI/CD module imports

All content is demo-safe and does not include production secrets.
"""

__version__ = "1.0.0"
