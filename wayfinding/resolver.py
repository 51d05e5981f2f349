"""Free-text location resolution.

Queries such as "Аудиторія 204", "204", "аудиторія 2.04" or "cafe" are mapped
to graph node ids. Matching is case- and diacritic-insensitive and ignores a
leading room/auditorium word.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass

from wayfinding.graph import Graph
from wayfinding.registry import LocationRegistry

ROOM_WORDS = ("аудиторія", "аудитория", "кімната", "auditorium", "room", "ауд")
ITEM_TITLE_SEPARATOR = " • "

_WHITESPACE = re.compile(r"\s+")
_ROOM_CODE_QUERY = re.compile(r"\d{3,4}[a-zа-яієїґ]?")


def fold(value: str) -> str:
    """Lowercase and drop combining marks after NFD decomposition."""
    decomposed = unicodedata.normalize("NFD", value.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _room_word_pattern() -> re.Pattern[str]:
    words = sorted({fold(word) for word in ROOM_WORDS}, key=len, reverse=True)
    alternatives = "|".join(re.escape(word) for word in words)
    return re.compile(rf"^(?:{alternatives})\b\.?\s*")


_ROOM_WORD = _room_word_pattern()


def normalize_query(value: str) -> str:
    """Normalize a query or display name for comparison."""
    folded = _WHITESPACE.sub(" ", fold(value).strip())
    return _ROOM_WORD.sub("", folded, count=1).strip()


@dataclass(frozen=True, slots=True)
class SelectableItem:
    """Location picker entry."""

    id: str
    name: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name}


class LocationResolver:
    """Resolve free text to node ids.

    Visible non-stair rooms and standalone points are resolvable by name;
    hidden rooms, stair landings and junctions only by their exact id.
    """

    def __init__(self, registry: LocationRegistry, graph: Graph) -> None:
        self._graph = graph

        titles_by_room = registry.point_titles_by_room()
        eligible_rooms = [room for room in registry.rooms if room.show and not room.stair]
        standalone = registry.standalone_points()

        self._eligible_ids: dict[str, str] = {}
        self._room_ids: dict[str, str] = {}
        self._names: dict[str, str] = {}
        items: list[SelectableItem] = []

        for room in eligible_rooms:
            self._eligible_ids.setdefault(room.id.lower(), room.id)
            self._room_ids.setdefault(room.id.lower(), room.id)
            self._names.setdefault(normalize_query(room.name), room.id)

            titles = titles_by_room.get(room.id, [])
            for title in titles:
                self._names.setdefault(normalize_query(title), room.id)
            label = room.name if not titles else f"{room.name}{ITEM_TITLE_SEPARATOR}{', '.join(titles)}"
            items.append(SelectableItem(id=room.id, name=label))

        for point in standalone:
            self._eligible_ids.setdefault(point.id.lower(), point.id)
            self._names.setdefault(normalize_query(point.title), point.id)
            items.append(SelectableItem(id=point.id, name=point.title))

        self._items: tuple[SelectableItem, ...] = tuple(items)

    def resolve(self, query: str) -> str | None:
        """Resolve one query; first match wins: id, room code, display name."""
        if not query:
            return None

        raw = query.strip()
        if raw in self._graph.nodes:
            return raw

        normalized = normalize_query(query)
        if not normalized:
            return None

        exact = self._eligible_ids.get(normalized)
        if exact is not None:
            return exact

        code = _ROOM_CODE_QUERY.search(normalized)
        if code is not None:
            by_code = self._room_ids.get(code.group(0))
            if by_code is not None:
                return by_code

        return self._names.get(normalized)

    def selectable_items(self) -> list[SelectableItem]:
        """Visible rooms (with annotation titles) followed by standalone points."""
        return list(self._items)

    def suggest(self, query: str, limit: int | None = None) -> list[SelectableItem]:
        """Selectable items whose folded name contains the folded query."""
        needle = fold(query).strip()
        if not needle:
            matches = list(self._items)
        else:
            matches = [item for item in self._items if needle in fold(item.name)]
        return matches if limit is None else matches[: max(0, limit)]
