"""Core provider abstractions."""
from ltc_tracker.providers.core.cache import TTLCache
from ltc_tracker.providers.core.error_mapper import UpstreamErrorMapper
from ltc_tracker.providers.core.provider_abc import HTTPProviderABC
from ltc_tracker.providers.core.utils import round2

__all__ = [
    "HTTPProviderABC",
    "TTLCache",
    "UpstreamErrorMapper",
    "round2",
]
