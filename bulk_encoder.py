"""Build `_bulk` request bodies for a data stream.

Data streams are append-only, so every document goes in with a ``create``
action. The wire form is NDJSON: one action line, then one document line.
"""
import json
from typing import Any, Dict, Iterable, Iterator, List, NamedTuple, Tuple

CREATE_OP = "create"


class BulkLine(NamedTuple):
    action: Dict[str, Any]
    document: Dict[str, Any]


class BulkRequestBody:
    def __init__(self, lines: Iterable[BulkLine] = ()):
        self._lines: List[BulkLine] = list(lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[BulkLine]:
        return iter(self._lines)

    def __bool__(self) -> bool:
        return bool(self._lines)

    def lines(self) -> Iterator[str]:
        for line in self._lines:
            yield json.dumps(line.action, separators=(",", ":"))
            yield json.dumps(line.document, separators=(",", ":"), ensure_ascii=False)

    def to_ndjson(self) -> str:
        # no trailing newline: the client appends one when it sends the body
        return "\n".join(self.lines())


def create_action() -> Dict[str, Any]:
    return {CREATE_OP: {}}


def encode(records: Iterable[Tuple[Any, Dict[str, Any]]]) -> BulkRequestBody:
    """Turn ``(timestamp, document)`` pairs into a bulk body, preserving order.

    The timestamp is not copied into the document; callers stamp documents
    before encoding.
    """
    return BulkRequestBody(BulkLine(create_action(), document) for _, document in records)
