"""Owner-gated access control.

Exactly one identity is owner once the gate is initialized. Privileged
operations call ``require_owner`` before touching any state.
"""

from __future__ import annotations

import logging
from typing import Optional

from ideamarket.errors import AlreadyInitialized, InvalidParameters, Unauthorized

logger = logging.getLogger(__name__)

ONLY_OWNER = "Ownable: onlyOwner"


class Ownable:
    """Stores the owner identity and checks callers against it."""

    def __init__(self, owner: Optional[str] = None) -> None:
        self._owner = owner

    @property
    def initialized(self) -> bool:
        return self._owner is not None

    def initialize(self, owner: str) -> None:
        """Set the owner. Fails with ``AlreadyInitialized`` on a second call."""
        if self.initialized:
            raise AlreadyInitialized("Initializable: contract is already initialized")
        if not owner:
            raise InvalidParameters("initialize: owner is required")
        self._owner = owner
        logger.info("Owner set to %s", owner)

    def get_owner(self) -> Optional[str]:
        return self._owner

    def is_owner(self, caller: Optional[str]) -> bool:
        """Check whether *caller* is the owner.

        Parameters
        ----------
        caller:
            Identity invoking the operation.

        Returns
        -------
        bool
            False before initialization and for any identity but the owner.
        """
        return self._owner is not None and caller == self._owner

    def require_owner(self, caller: Optional[str]) -> None:
        """Raise ``Unauthorized`` unless *caller* is the owner.

        Usage in a privileged operation::

            def set_trading_fee(self, market_id, rate, *, caller):
                self._ownable.require_owner(caller)
                ...
        """
        if not self.is_owner(caller):
            logger.warning("Rejected privileged call from %s", caller)
            raise Unauthorized(ONLY_OWNER)
