"""LTC mining account tracker: session auth and owner-scoped earnings records."""

__version__ = "0.1.0"
