"""
Helper utilities for the Users API load test.

Provides the synthetic data and small response accessors the iteration
script relies on.  Keeping these in a shared module makes it easy to
adjust data-generation strategies in one place.
"""

from __future__ import annotations

import random
import string
from typing import Any

from faker import Faker

fake = Faker()

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def random_user_payload() -> dict[str, str]:
    """
    Build a user-create payload with a human-like name and a valid email.

    A short random tag is added to the local part of the Faker email so
    that long runs rarely repeat an address (a repeat would be rejected
    with ``409`` and show up as a failed write check).

    Returns:
        A JSON-serialisable ``{"name": ..., "email": ...}`` dictionary.
    """
    local_part, _, domain = fake.email().partition("@")
    tag = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return {
        "name": fake.name(),
        "email": f"{local_part}.{tag}@{domain}",
    }


def duration_ms(response: Any) -> float:
    """Return the response's round-trip time in milliseconds."""
    elapsed = getattr(response, "elapsed", None)
    if elapsed is None:
        return 0.0
    return elapsed.total_seconds() * 1000.0
