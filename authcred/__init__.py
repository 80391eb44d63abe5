"""Credentials, token cache hooks, call options and errors for confidential clients."""

__version__ = "0.1.0"

__all__ = ["cache", "credentials", "errors", "options"]