"""
Dedup key generation.

sha256(email + description) - normalized for consistent hashing.
"""

import hashlib

from lead_intake.schemas.lead import LeadSubmission


def compute_dedup_key(lead: LeadSubmission) -> str:
    """
    Generate the dedup key for a lead.

    Email is case-folded; description whitespace is collapsed so resubmitting
    the same form produces the same key.
    """
    email = str(lead.email).strip().lower()
    description = " ".join(lead.description.split())

    combined = f"{email}{description}"
    return hashlib.sha256(combined.encode("utf-8")).hexdigest()
