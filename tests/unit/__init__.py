"""
Unit tests package.

Contains unit tests for individual modules and functions in isolation.
These tests use in-memory lookups or temporary files and mock failing
dependencies.
"""
