"""Case-insensitive user property map carried as HTTP headers."""

from requests.structures import CaseInsensitiveDict


class Properties(CaseInsensitiveDict):
    """String-keyed map with case-insensitive lookup and assignment.

    Unlike ``CaseInsensitiveDict``, assigning to a key that already exists
    under a different casing keeps the casing it was first stored with, so
    iteration yields stable key names.
    """

    def __setitem__(self, key: str, value: str) -> None:
        existing = self._store.get(key.lower())
        if existing is not None:
            key = existing[0]
        super().__setitem__(key, value)

    def set(self, key: str, value: str) -> None:
        """Set *key* to *value*, overwriting any case-variant of *key*."""
        self[key] = value

    def copy(self) -> "Properties":
        return Properties(self._store.values())

    def __repr__(self) -> str:
        return f"Properties({dict(self.items())!r})"
