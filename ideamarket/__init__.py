"""ideamarket — market and token registry for the Ideamarket exchange."""

__version__ = "0.1.0"
