"""Service layer: the public query API over an immutable content index."""

from content_search.service_layer.search_service import ContentSearch, SearchEngineHandle


__all__ = ["ContentSearch", "SearchEngineHandle"]
