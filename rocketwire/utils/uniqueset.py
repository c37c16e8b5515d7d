"""A set keyed by each item's unique id, with a stable JSON form."""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Iterator, Protocol


class UniqueItem(Protocol):
    def unique_id(self) -> str: ...


class StringUnique(str):
    """A string that is its own unique id."""

    def unique_id(self) -> str:
        return str(self)


def _item_json(item: Any) -> str:
    if isinstance(item, StringUnique):
        return '"' + str(item) + '"'
    if hasattr(item, "to_dict"):
        value = item.to_dict()
    elif dataclasses.is_dataclass(item) and not isinstance(item, type):
        value = dataclasses.asdict(item)
    else:
        value = item
    return json.dumps(value, separators=(",", ":"))


class UniqueSet:
    """Items stored by their unique id; adding an equal id replaces the item."""

    def __init__(self) -> None:
        self._items: dict[str, Any] = {}

    def add(self, item: UniqueItem) -> None:
        self._items[item.unique_id()] = item

    def add_kv(self, key: str, value: str) -> None:
        self._items[key] = StringUnique(value)

    def get(self, key: str) -> Any | None:
        """Return the item stored under ``key``, or None."""
        return self._items.get(key)

    def marshal_json(self) -> str:
        """Return a JSON array of the items, sorted by their JSON text."""
        if not self._items:
            return "[]"
        encoded = sorted(_item_json(item) for item in self._items.values())
        return "[" + ",".join(encoded) + "]"

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._items.values()))