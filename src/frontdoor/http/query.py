"""Read-only query string parameters."""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs


class QueryParams(Mapping[str, str]):
    """Query string parameters. ``[key]`` gives the first value."""

    __slots__ = ("_data", "_raw")

    def __init__(self, query_string: bytes = b"") -> None:
        self._raw = query_string
        self._data = parse_qs(query_string.decode("latin-1"), keep_blank_values=True)

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def get_list(self, key: str) -> list[str]:
        """All values for *key* (``?tag=a&tag=b`` -> ``["a", "b"]``)."""
        return list(self._data.get(key, ()))

    @property
    def raw(self) -> bytes:
        return self._raw
