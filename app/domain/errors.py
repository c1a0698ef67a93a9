# app/domain/errors.py
"""Exceptions shared by the repositories, the invoice actions and auth."""

from __future__ import annotations


class PersistenceError(Exception):
    """A database statement failed. The original error is chained as ``__cause__``."""


class InvoiceDeleteError(Exception):
    """Deleting an invoice failed. Not recovered by the action itself."""


class AuthError(Exception):
    """
    Authentication failure.

    ``type`` tells the kind of failure apart, e.g. ``"CredentialsSignin"``
    for a wrong email/password pair.
    """

    def __init__(self, type: str, message: str | None = None) -> None:
        super().__init__(message or type)
        self.type = type
