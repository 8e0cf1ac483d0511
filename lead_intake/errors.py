"""
Pipeline error taxonomy.

Each stage raises its own kind; the HTTP layer decides what the caller sees.
"""


class LeadIntakeError(Exception):
    """Base class for every failure the lead pipeline reports."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LeadIntakeError):
    """Submitted lead fields do not match the intake shape."""


class AIProcessingError(LeadIntakeError):
    """Model call failed or returned text that is not the expected object."""

    def __init__(self, message: str, stage: str):
        super().__init__(message)
        self.stage = stage


class DeliveryError(LeadIntakeError):
    """Mail provider rejected the send."""


class CredentialError(DeliveryError):
    """Client-credentials token exchange failed."""


class ArchivalError(LeadIntakeError):
    """Lead record could not be written to the store."""


class DuplicateLeadError(LeadIntakeError):
    """Lead was already processed and duplicates are rejected."""
