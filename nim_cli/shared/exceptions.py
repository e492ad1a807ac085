"""Project-wide custom exceptions."""

from __future__ import annotations


class NimAgentError(Exception):
    """Base exception for the agent tool suite."""


class ConfigurationError(NimAgentError):
    """Raised when configuration loading or validation fails."""


class TransactionSourceError(NimAgentError):
    """Raised when a transaction export cannot be read or has the wrong shape."""
