"""Short random identifiers for generated sites."""

from __future__ import annotations

import secrets

DEFAULT_ID_BYTES = 4


def generate_site_id(nbytes: int = DEFAULT_ID_BYTES) -> str:
    """Return a lowercase hex id carrying ``nbytes`` of randomness.

    Examples
    --------
    >>> len(generate_site_id())
    8
    """
    if nbytes < 1:
        msg = f"Site ids need at least one byte of randomness, got {nbytes}."
        raise ValueError(msg)
    return secrets.token_hex(nbytes)


__all__ = ["DEFAULT_ID_BYTES", "generate_site_id"]
