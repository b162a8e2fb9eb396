from typing import Hashable, Iterator

from .errors import UnhashableValueError


class PropertyIndex:
    '''
    Index of a single searchable property.
    Maps each extracted value to the slots (positions in the owning collection)
    of the elements that produced it, in insertion order.
    A value with no slots is absent from the index, never an empty list.
    '''

    def __init__(self, prop: Hashable) -> None:
        self.prop = prop
        self._index: dict[Hashable, list[int]] = {}

    def add(self, value: Hashable, slot: int) -> None:
        '''
        records slot under value
        '''
        try:
            slots = self._index.get(value)
        except TypeError as e:
            raise UnhashableValueError(f"Unhashable type {type(value)}") from e

        if slots is None:
            self._index[value] = [slot]
        else:
            slots.append(slot)

    def discard(self, value: Hashable, slot: int) -> None:
        '''
        removes slot from the bucket of value, dropping the bucket once empty
        '''
        slots = self._index.get(value)
        if not slots:
            return

        # the slot being undone is normally the newest one
        if slots[-1] == slot:
            slots.pop()
        elif slot in slots:
            slots.remove(slot)

        if len(slots) == 0:
            del self._index[value]

    def slots(self, value: Hashable) -> list[int]:
        try:
            return list(self._index.get(value, ()))
        except TypeError:
            return []

    def has(self, value: Hashable) -> bool:
        try:
            return value in self._index
        except TypeError:
            return False

    def values(self) -> list[Hashable]:
        return list(self._index)

    def items(self) -> Iterator[tuple[Hashable, list[int]]]:
        for value, slots in self._index.items():
            yield value, list(slots)

    def clear(self) -> None:
        self._index.clear()

    def __contains__(self, value: Hashable) -> bool:
        return self.has(value)

    def __len__(self) -> int:
        return len(self._index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PropertyIndex):
            return NotImplemented
        return self.prop == other.prop and self._index == other._index

    __hash__ = None

    def __repr__(self) -> str:
        return f"PropertyIndex({self.prop!r}, values={len(self._index)})"
