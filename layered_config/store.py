"""
In-memory normalized key-value store.

Single-writer: the store performs no locking. Callers that share one store
across threads must serialize access themselves.
"""

from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from .normalize import as_bool, as_float, as_int, as_str, normalize_key, normalize_value

_MISSING = object()


class ConfigStore:
    """Mapping from uppercased key to normalized value. Last write wins."""

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}

    def set(self, key: str, value: Any, *, coerce: bool = True) -> None:
        """
        Store a value under the normalized key, replacing any previous one.

        Args:
            key: Key in any case
            value: Raw value
            coerce: If False, the value is stored as given (no type coercion)
        """
        self._data[normalize_key(key)] = normalize_value(value) if coerce else value

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(normalize_key(key), default)

    def get_all(self) -> Dict[str, Any]:
        """Return a snapshot of every entry. Ordering is not meaningful."""
        return dict(self._data)

    def update(self, values: Mapping[str, Any]) -> None:
        for key, value in values.items():
            self.set(str(key), value)

    def keys(self) -> List[str]:
        return list(self._data)

    def get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        return self._typed_get(key, as_int, default)

    def get_bool(self, key: str, default: Optional[bool] = None) -> Optional[bool]:
        return self._typed_get(key, as_bool, default)

    def get_float(self, key: str, default: Optional[float] = None) -> Optional[float]:
        return self._typed_get(key, as_float, default)

    def get_str(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._typed_get(key, as_str, default)

    def _typed_get(self, key: str, convert: Callable[[Any], Any], default: Any) -> Any:
        value = self._data.get(normalize_key(key), _MISSING)
        if value is _MISSING:
            return default
        return convert(value)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_key(key) in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

    def __repr__(self) -> str:
        return f"ConfigStore(keys={sorted(self._data)})"
