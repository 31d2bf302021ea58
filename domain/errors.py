# domain/errors.py
"""Exceptions raised by the SmartQuote domain and services."""


class SmartQuoteError(Exception):
    """Base class for SmartQuote errors."""


class InputIncompleteError(SmartQuoteError):
    """A required selection is missing (business profile, client, line items).

    The message is meant to be shown to the user as is.
    """


class InvalidDocumentError(SmartQuoteError):
    """Document inputs are present but not acceptable (negative amounts, discount above subtotal)."""


class AIProviderError(SmartQuoteError):
    """The external pricing provider could not be reached or answered with an error."""


class ExportError(SmartQuoteError):
    """A document could not be written to disk."""
