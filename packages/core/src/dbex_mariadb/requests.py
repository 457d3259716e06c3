"""Request kinds and decoding of opaque node contexts.

Hosts may build a request explicitly, or hand back the ``datasets`` of the
clicked node and let :func:`parse_request` pick the kind. Decoding walks an
ordered predicate list and the first match wins, so a context that
satisfies several predicates always resolves to the earliest one.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from dbex_mariadb.catalog.routines import RoutineKind


@dataclass(frozen=True)
class SchemaList:
    """Connection root: list every schema."""


@dataclass(frozen=True)
class SchemaTopics:
    schema: str


@dataclass(frozen=True)
class TableList:
    schema: str


@dataclass(frozen=True)
class TableItem:
    schema: str
    table: str


@dataclass(frozen=True)
class ViewList:
    schema: str


@dataclass(frozen=True)
class ViewItem:
    schema: str
    view: str


@dataclass(frozen=True)
class RoutineList:
    schema: str
    kind: RoutineKind


@dataclass(frozen=True)
class RoutineItem:
    schema: str
    name: str
    kind: RoutineKind


@dataclass(frozen=True)
class EventList:
    schema: str


@dataclass(frozen=True)
class EventItem:
    schema: str
    name: str


@dataclass(frozen=True)
class TriggerItem:
    schema: str
    name: str


@dataclass(frozen=True)
class TriggerList:
    schema: str


Request = (
    SchemaList
    | SchemaTopics
    | TableList
    | TableItem
    | ViewList
    | ViewItem
    | RoutineList
    | RoutineItem
    | EventList
    | EventItem
    | TriggerItem
    | TriggerList
)


def _text(datasets: Mapping[str, Any], key: str) -> str:
    value = datasets.get(key)
    return "" if value is None else str(value)


def _routine_kind(datasets: Mapping[str, Any]) -> RoutineKind | None:
    try:
        return RoutineKind(_text(datasets, "routineType").upper())
    except ValueError:
        return None


Decoder = Callable[[Mapping[str, Any]], Request | None]


def _when(key: str, build: Callable[[Mapping[str, Any]], Request]) -> Decoder:
    def decode(datasets: Mapping[str, Any]) -> Request | None:
        return build(datasets) if _text(datasets, key) else None

    return decode


def _routine_item(datasets: Mapping[str, Any]) -> Request | None:
    kind = _routine_kind(datasets)
    if not _text(datasets, "routine") or kind is None:
        return None
    return RoutineItem(_text(datasets, "schema"), _text(datasets, "routine"), kind)


def _connection_root(datasets: Mapping[str, Any]) -> Request | None:
    if _text(datasets, "host") and _text(datasets, "user"):
        return SchemaList()
    return None


# Order is part of the contract: earliest match wins.
DECODERS: tuple[Decoder, ...] = (
    _when("database", lambda d: SchemaTopics(_text(d, "database"))),
    _when("tables", lambda d: TableList(_text(d, "tables"))),
    _when("table", lambda d: TableItem(_text(d, "schema"), _text(d, "table"))),
    _when("views", lambda d: ViewList(_text(d, "views"))),
    _when("view", lambda d: ViewItem(_text(d, "schema"), _text(d, "view"))),
    _when("functions", lambda d: RoutineList(_text(d, "functions"), RoutineKind.FUNCTION)),
    _when("procedures", lambda d: RoutineList(_text(d, "procedures"), RoutineKind.PROCEDURE)),
    _routine_item,
    _when("events", lambda d: EventList(_text(d, "events"))),
    _when("event", lambda d: EventItem(_text(d, "schema"), _text(d, "event"))),
    _when("trigger", lambda d: TriggerItem(_text(d, "schema"), _text(d, "trigger"))),
    _when("triggers", lambda d: TriggerList(_text(d, "triggers"))),
    _connection_root,
)


def parse_request(datasets: Mapping[str, Any] | None) -> Request | None:
    """Decode a node context into a request, or None when nothing applies."""
    if not datasets:
        return None
    for decode in DECODERS:
        request = decode(datasets)
        if request is not None:
            return request
    return None
