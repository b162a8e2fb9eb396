from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Hashable

from .errors import ConfigurationError

Extractor = Callable[[Any], Hashable]


@dataclass(frozen=True)
class SearchableProperty:
    '''
    A named searchable dimension of a collection.
     - name - stable identifier, used in repr and logs
     - func - pure extraction function, element -> hashable value
    The record itself is the key passed to lookups.
    '''
    name: str
    func: Extractor

    def extract(self, element: Any) -> Hashable:
        return self.func(element)

    def __repr__(self) -> str:
        return f"SearchableProperty({self.name!r})"


class extractor:
    '''
    wraps an extraction function so it survives as an Enum member value
    (a bare function in an Enum body becomes a method)
    '''
    __slots__ = ("func",)

    def __init__(self, func: Extractor) -> None:
        self.func = func

    def __call__(self, element: Any) -> Hashable:
        return self.func(element)

    def __repr__(self) -> str:
        return f"extractor({getattr(self.func, '__name__', self.func)!r})"


class SearchablePropertyEnum(Enum):
    '''
    Base class for an enumeration of searchable properties.
    Member values are extraction functions wrapped with `extractor`,
    non-descriptor callables (operator.attrgetter, ...) or SearchableProperty records.
    '''

    @property
    def func(self) -> Extractor:
        return _unwrap(self.value)

    def extract(self, element: Any) -> Hashable:
        return self.func(element)


def _unwrap(value: Any) -> Any:
    if isinstance(value, (extractor, SearchableProperty)):
        return value.func
    return value


def property_name(prop: Hashable) -> str:
    '''
    readable name of a property identifier
    '''
    if isinstance(prop, (Enum, SearchableProperty)):
        return prop.name
    return str(prop)


def resolve_properties(source: Any) -> dict[Hashable, Extractor]:
    '''
    resolves a property source into an ordered mapping of identifier -> extraction function
    accepted sources:
     - an Enum subclass whose members carry extraction functions
     - a mapping of hashable identifier -> extraction function
     - a finite collection of SearchableProperty records or property enum members
    raises ConfigurationError if the source is empty or not one of the above
    '''
    if source is None:
        raise ConfigurationError("searchable properties must not be None")

    if isinstance(source, type):
        if not issubclass(source, Enum):
            raise ConfigurationError(
                f"{source!r} must be an Enum of searchable properties"
            )
        # members with equal values collapse into aliases of the first one
        aliases = [name for name, member in source.__members__.items() if member.name != name]
        if aliases:
            raise ConfigurationError(
                f"{source!r} declares aliased searchable properties {aliases}, "
                f"every property needs its own extraction function"
            )
        pairs = [(member, _unwrap(member.value)) for member in source]
    elif isinstance(source, Mapping):
        pairs = list(source.items())
    elif isinstance(source, (str, bytes)):
        raise ConfigurationError(
            f"{source!r} is not a collection of searchable properties"
        )
    elif isinstance(source, Iterator):
        # a one-shot iterator cannot be re-read and may never end
        raise ConfigurationError(
            "searchable properties must be a finite collection, not an iterator"
        )
    else:
        try:
            items = list(source)
        except TypeError as e:
            raise ConfigurationError(
                f"{source!r} is not a collection of searchable properties"
            ) from e
        pairs = [(item, _descriptor_func(item)) for item in items]

    if not pairs:
        raise ConfigurationError(
            f"{source!r} must contain at least 1 searchable property"
        )

    resolved: dict[Hashable, Extractor] = {}
    for prop, func in pairs:
        try:
            duplicate = prop in resolved
        except TypeError as e:
            raise ConfigurationError(
                f"property identifier {prop!r} is not hashable"
            ) from e
        if duplicate:
            raise ConfigurationError(f"duplicate searchable property {prop!r}")
        if not callable(func):
            raise ConfigurationError(
                f"searchable property {property_name(prop)} has no extraction function"
            )
        resolved[prop] = func

    return resolved


def _descriptor_func(item: Any) -> Any:
    if isinstance(item, SearchableProperty):
        return item.func
    if isinstance(item, Enum):
        return _unwrap(item.value)
    raise ConfigurationError(f"{item!r} is not a searchable property")
