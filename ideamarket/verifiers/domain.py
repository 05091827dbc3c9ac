"""Domain-name verifier: ``label.tld`` with no subdomain."""

from __future__ import annotations

import re

from ideamarket.verifiers.base import BaseNameVerifier

_LABEL = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")
_TLD = re.compile(r"^[a-z]{2,63}$")


class DomainNoSubdomainNameVerifier(BaseNameVerifier):
    """Accepts lowercase second-level domains such as ``example.com``.

    Rules:
    - exactly one dot
    - the label is 1-63 chars of ``[a-z0-9-]`` and does not start or end with ``-``
    - the TLD is at least two lowercase letters
    """

    key = "domain_no_subdomain"

    def is_valid(self, name: str) -> bool:
        if not name or name.count(".") != 1:
            return False
        label, tld = name.split(".")
        return bool(_LABEL.match(label)) and bool(_TLD.match(tld))
