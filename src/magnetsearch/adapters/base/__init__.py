"""Base adapter interface — Abstract classes for search source connectors."""

from magnetsearch.adapters.base.adapter import SearchAdapter
from magnetsearch.adapters.base.registry import AdapterRegistry
from magnetsearch.adapters.base.remote import RemoteSearchAdapter

__all__ = ["AdapterRegistry", "RemoteSearchAdapter", "SearchAdapter"]
