from .collection import MultiPropertySearchCollection
from .errors import ConfigurationError, MultiSearchError, UnhashableValueError
from .index import PropertyIndex
from .locking import ReadWriteLock, SynchronizedSearchCollection
from .searchable import (
    SearchableProperty,
    SearchablePropertyEnum,
    extractor,
    resolve_properties,
)

__version__ = "0.1.0"

__all__ = [
    "MultiPropertySearchCollection",
    "SynchronizedSearchCollection",
    "ReadWriteLock",
    "PropertyIndex",
    "SearchableProperty",
    "SearchablePropertyEnum",
    "extractor",
    "resolve_properties",
    "MultiSearchError",
    "ConfigurationError",
    "UnhashableValueError",
]
