"""Argument matchers, expected calls with counts, actions and ordering, and naming helpers for mocks."""

__version__ = "0.1.0"