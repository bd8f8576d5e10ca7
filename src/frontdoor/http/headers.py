"""Case-insensitive, read-only view over raw ASGI header pairs."""

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Read-only HTTP headers, looked up case-insensitively.

    Keeps the raw byte pairs from the ASGI scope and decodes on access.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        self._raw = raw

    def __getitem__(self, key: str) -> str:
        wanted = key.lower().encode("latin-1")
        for name, value in self._raw:
            if name.lower() == wanted:
                return value.decode("latin-1")
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._raw:
            key = name.decode("latin-1").lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        return f"Headers({dict(self)!r})"

    def get_list(self, key: str) -> list[str]:
        """All values sent for *key*, in order."""
        wanted = key.lower().encode("latin-1")
        return [value.decode("latin-1") for name, value in self._raw if name.lower() == wanted]

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        return self._raw
