"""
=============================================================================
HTTP HEADERS
=============================================================================

An ordered, case-insensitive header collection shared by requests and
responses.

=============================================================================
WHY NOT A PLAIN DICT?
=============================================================================

A dict keyed by the name as sent loses two things:

    1. CASE-INSENSITIVITY
       "User-Agent", "user-agent" and "USER-AGENT" are the same header
       (RFC 7230 3.2). curl sends "User-Agent", some clients lowercase
       everything. A lookup must find all three.

    2. A STABLE WIRE ORDER
       Responses are serialized header by header. Emitting them in the
       order they were set keeps output deterministic and testable.

So Headers keeps BOTH:

    _items  [["Content-Type", "text/plain"], ["Content-Length", "5"]]
               ────────┬──────────────────
                       └── ordered pairs, original casing (wire order)

    _index  {"content-type": 0, "content-length": 1}
               ──────┬──────
                     └── lowercased name → position in _items

=============================================================================
DUPLICATES
=============================================================================

No multi-value support: setting a name that already exists replaces the
earlier value in place. For parsed requests this means the LAST occurrence
of a repeated header wins:

    X-Trace: a
    X-Trace: b        →  headers["x-trace"] == "b"

=============================================================================
"""

from collections.abc import Mapping, MutableMapping
from typing import Dict, Iterable, Iterator, List, Optional, Tuple


class Headers(MutableMapping):
    """
    Ordered header mapping with case-insensitive lookup.

    Behaves like a dict for the common operations:

        headers = Headers()
        headers["Content-Type"] = "text/plain"
        headers["content-type"]          # "text/plain"
        "CONTENT-TYPE" in headers        # True
        del headers["Content-Type"]

    Iteration yields names in insertion order with the casing they were
    last set with.
    """

    def __init__(self, items: Optional[Iterable[Tuple[str, str]]] = None):
        self._items: List[List[str]] = []
        self._index: Dict[str, int] = {}
        if items is not None:
            if isinstance(items, Mapping):
                items = items.items()
            for name, value in items:
                self[name] = value

    def __getitem__(self, name: str) -> str:
        return self._items[self._index[name.lower()]][1]

    def __setitem__(self, name: str, value: str) -> None:
        key = name.lower()
        position = self._index.get(key)
        if position is None:
            self._index[key] = len(self._items)
            self._items.append([name, value])
        else:
            self._items[position] = [name, value]

    def __delitem__(self, name: str) -> None:
        position = self._index.pop(name.lower())
        del self._items[position]
        # Everything after the removed pair shifted left by one
        for key, index in self._index.items():
            if index > position:
                self._index[key] = index - 1

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return name.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Headers({[tuple(pair) for pair in self._items]!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self.pairs() == other.pairs()
        return NotImplemented

    def pairs(self) -> List[Tuple[str, str]]:
        """Name/value pairs in wire order."""
        return [(name, value) for name, value in self._items]

    def copy(self) -> "Headers":
        return Headers(self.pairs())
