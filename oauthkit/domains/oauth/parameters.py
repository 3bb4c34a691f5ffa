"""Ordered, key-unique parameter collection.

Iteration order is the order in which keys were first added. Header and
query-string serialization emit parameters in that order, so callers that
need a particular wire order must add (or :meth:`ParameterList.sort`) the
parameters accordingly. Adding an existing key replaces its value in place.
"""

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qsl

from oauthkit.domains.oauth.encoding import percent_encode

ParameterSource = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


class ParameterList:
    """Insertion-ordered mapping of parameter names to string values."""

    def __init__(self, params: Optional[ParameterSource] = None) -> None:
        self._params: Dict[str, str] = {}
        if params:
            self.add_all(params)

    def add(self, key: str, value: str) -> None:
        if not isinstance(key, str) or not key:
            raise ValueError("Parameter key must be a non-empty string")
        if value is None:
            raise ValueError(f"Parameter '{key}' must not be None")
        self._params[key] = str(value)

    def add_all(self, params: ParameterSource) -> None:
        items = params.items() if isinstance(params, Mapping) else params
        for key, value in items:
            self.add(key, value)

    def add_query_string(self, query: str) -> None:
        """Parse a raw ``a=1&b=2`` query string and add its pairs."""
        if not query:
            return
        for key, value in parse_qsl(query, keep_blank_values=True):
            self.add(key, value)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._params.get(key, default)

    def remove(self, key: str) -> None:
        self._params.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._params)

    def items(self) -> List[Tuple[str, str]]:
        return list(self._params.items())

    def sort(self) -> None:
        """Reorder in place by key."""
        self._params = dict(sorted(self._params.items()))

    def encoded_pairs(self) -> List[Tuple[str, str]]:
        """Return ``(encode(key), encode(value))`` tuples in iteration order."""
        return [(percent_encode(k), percent_encode(v)) for k, v in self._params.items()]

    def as_form_urlencoded(self) -> str:
        """Serialize as ``k1=v1&k2=v2`` with both sides percent-encoded."""
        return "&".join(f"{k}={v}" for k, v in self.encoded_pairs())

    def append_to(self, url: str) -> str:
        """Append the parameters to ``url`` as a query string."""
        if not self._params:
            return url
        separator = "&" if "?" in url else "?"
        return f"{url}{separator}{self.as_form_urlencoded()}"

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __getitem__(self, key: str) -> str:
        return self._params[key]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParameterList):
            return NotImplemented
        return self.items() == other.items()

    def __repr__(self) -> str:
        return f"ParameterList({self._params!r})"
