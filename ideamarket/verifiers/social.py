"""Social-handle verifiers."""

from __future__ import annotations

import re

from ideamarket.verifiers.base import BaseNameVerifier

_TWITTER_HANDLE = re.compile(r"^@[A-Za-z0-9_]{1,15}$")


class TwitterHandleNameVerifier(BaseNameVerifier):
    """Accepts ``@handle`` with 1-15 letters, digits or underscores."""

    key = "twitter_handle"

    def is_valid(self, name: str) -> bool:
        return bool(name) and bool(_TWITTER_HANDLE.match(name))
