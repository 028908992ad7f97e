"""Identifier generation for ledger records."""

import uuid


def new_identifier() -> str:
    """Return a globally unique, opaque record identifier."""
    return str(uuid.uuid4())
