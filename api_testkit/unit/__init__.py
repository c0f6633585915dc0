"""Offline unit tests for the API test kit framework."""
