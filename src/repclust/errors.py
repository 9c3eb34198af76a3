from __future__ import annotations


class SchemaError(ValueError):
    """Raised when a table lacks a required column or holds no rows."""


class InvalidArgumentError(ValueError):
    """Raised for out-of-range arguments and unsupported method or distance names."""


class ConfigLoadError(Exception):
    """Raised for any problem during YAML/CSV loading."""
