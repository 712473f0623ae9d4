"""Usage record storage adapters.

Persistent storage is an external concern; the service ships with an
in-memory store behind the same interface a database backend would implement.
"""

from finchat.adapters.analytics.base import AbstractAnalyticsStore
from finchat.adapters.analytics.in_memory import InMemoryAnalyticsStore

__all__ = ["AbstractAnalyticsStore", "InMemoryAnalyticsStore"]
