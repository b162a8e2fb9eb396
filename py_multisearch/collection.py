import logging
from typing import Any, Generic, Hashable, Iterable, Iterator, Optional, TypeVar

from .index import PropertyIndex
from .searchable import Extractor, property_name, resolve_properties

T = TypeVar('T')

logger = logging.getLogger(__name__)


class MultiPropertySearchCollection(Generic[T]):
    '''
    MultiPropertySearchCollection is an append-only collection of elements
    that can be searched by equality on any of its declared searchable properties.
    Every element is indexed once per property when it is added, so lookups
    cost a hash lookup plus the size of the result, independent of the collection size.
    Not thread safe, see SynchronizedSearchCollection.
    '''

    def __init__(self, properties: Any, elements: Optional[Iterable[T]] = None) -> None:
        '''
         - properties - Enum of searchable properties, mapping of identifier -> extraction function,
           or a collection of SearchableProperty records
         - elements - optional elements to add, in order
        raises ConfigurationError if properties is empty or invalid
        '''
        self._extractors: dict[Hashable, Extractor] = resolve_properties(properties)
        self._elements: list[T] = []
        self._indices: dict[Hashable, PropertyIndex] = self._new_indices()

        logger.debug(
            "created search collection over properties %s",
            [property_name(p) for p in self._extractors],
        )

        if elements is not None:
            self.add_elements_many(elements)

    @property
    def properties(self) -> tuple[Hashable, ...]:
        '''
        the searchable properties, in declaration order
        '''
        return tuple(self._extractors)

    def add_element(self, element: T) -> None:
        '''
        adds the element and indexes it under every searchable property
        if an extraction function raises, the index updates already made for the element
        are undone and the error propagates, leaving the collection unchanged
        '''
        slot = len(self._elements)
        self._update_indices(element, slot)
        self._elements.append(element)

    def add_elements_many(self, elements: Iterable[T]) -> None:
        '''
        adds multiple elements in order
        stops at the first element that fails to index, earlier elements stay added
        elements is read in full first, so adding a collection to itself doubles it
        '''
        for element in list(elements):
            self.add_element(element)

    def _update_indices(self, element: T, slot: int) -> None:
        indexed: list[tuple[Hashable, Hashable]] = []
        try:
            for prop, func in self._extractors.items():
                value = func(element)
                self._indices[prop].add(value, slot)
                indexed.append((prop, value))
        except BaseException:
            for prop, value in reversed(indexed):
                try:
                    self._indices[prop].discard(value, slot)
                except Exception:
                    # keep undoing the other properties, the original error is re-raised below
                    logger.debug(
                        "could not undo slot %d of property %s",
                        slot, property_name(prop), exc_info=True,
                    )
            logger.debug(
                "indexing failed for slot %d after %d of %d properties, rolled back",
                slot, len(indexed), len(self._extractors),
            )
            raise

    def _index_for(self, prop: Hashable) -> Optional[PropertyIndex]:
        try:
            return self._indices.get(prop)
        except TypeError:
            return None

    def search_by_property(self, prop: Hashable, value: Hashable) -> list[T]:
        '''
        returns every element whose value for prop equals value, in insertion order
        an unknown property or value returns an empty list
        '''
        index = self._index_for(prop)
        if index is None:
            return []

        return [self._elements[slot] for slot in index.slots(value)]

    def contains(self, prop: Hashable, value: Hashable) -> bool:
        '''
        True if any element has value for prop, checked against the index only
        '''
        index = self._index_for(prop)
        if index is None:
            return False
        return index.has(value)

    def contains_element(self, element: T) -> bool:
        '''
        linear scan, compares by equality
        '''
        return element in self._elements

    def group_by(self, prop: Hashable) -> dict[Hashable, list[T]]:
        '''
        groups the elements by their value for prop, values in the order first seen
        '''
        index = self._index_for(prop)
        if index is None:
            return {}

        return {
            value: [self._elements[slot] for slot in slots]
            for value, slots in index.items()
        }

    def distinct_values(self, prop: Hashable) -> list[Hashable]:
        index = self._index_for(prop)
        if index is None:
            return []
        return index.values()

    def collect(self) -> list[T]:
        '''
        returns all elements as a new list, in insertion order
        '''
        return list(self._elements)

    def size(self) -> int:
        return len(self._elements)

    def is_empty(self) -> bool:
        return len(self._elements) == 0

    def clear(self) -> None:
        '''
        drops every element and every index entry together
        '''
        dropped = len(self._elements)
        self._elements, self._indices = [], self._new_indices()
        logger.debug("cleared search collection, dropped %d elements", dropped)

    def iterator(self) -> Iterator[T]:
        return iter(self._elements)

    def _new_indices(self) -> dict[Hashable, PropertyIndex]:
        return {prop: PropertyIndex(prop) for prop in self._extractors}

    def __iter__(self) -> Iterator[T]:
        return self.iterator()

    def __len__(self) -> int:
        return len(self._elements)

    def __contains__(self, element: object) -> bool:
        return self.contains_element(element)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, MultiPropertySearchCollection):
            return NotImplemented
        # indices are derived from elements and extractors
        return (
            self._elements == other._elements
            and list(self._extractors.items()) == list(other._extractors.items())
        )

    __hash__ = None

    def __repr__(self) -> str:
        names = ", ".join(property_name(p) for p in self._extractors)
        return f"{type(self).__name__}(properties=[{names}], size={len(self._elements)})"
