"""Utility functions."""

from wikiquest.utils.response import (
    conflict,
    error_response,
    not_found,
    server_error,
    success_response,
    unauthorized,
    validation_error,
)

__all__ = [
    "success_response",
    "error_response",
    "unauthorized",
    "not_found",
    "validation_error",
    "conflict",
    "server_error",
]
