"""Thread-safe cache for loaded board datasets.

The two board datasets are read once per process and treated as
read-only afterwards. ``_BoardDataCache`` keys each loaded dataset pair
by the resolved paths of its source files, so pointing the application at
different files loads them afresh while repeated startups reuse the
already parsed data.

Design notes:
    Fast-path lookup outside the lock, re-check inside it, as in any
    double-checked cache.
"""

import threading
from collections.abc import Callable
from pathlib import Path
from typing import Generic, TypeVar

T = TypeVar("T")


class _BoardDataCache(Generic[T]):
    """Cache of loaded values keyed by a tuple of resolved file paths.

    Example:
        >>> cache: _BoardDataCache[BoardData] = _BoardDataCache()
        >>> data = cache.load_or_store((layout_path, usage_path), _read_both)
    """

    def __init__(self) -> None:
        """Initialize an empty cache with its own threading lock."""
        self._cache: dict[tuple[str, ...], T] = {}
        self._lock = threading.Lock()

    def get(self, paths: tuple[Path | str, ...]) -> T | None:
        """Return the cached value for ``paths``, or None."""
        return self._cache.get(self._key(paths))

    def load_or_store(
        self,
        paths: tuple[Path | str, ...],
        loader: Callable[[tuple[Path, ...]], T],
    ) -> T:
        """Return the cached value, calling ``loader`` on first use.

        Args:
            paths: Source file paths (relative or absolute).
            loader: Receives the resolved paths and returns the loaded
                value. Called at most once per distinct set of paths
                unless the loader raises.

        Returns:
            The cached or freshly loaded value.
        """
        key = self._key(paths)

        if key in self._cache:
            return self._cache[key]

        with self._lock:
            if key in self._cache:
                return self._cache[key]

            value = loader(tuple(Path(p) for p in key))
            self._cache[key] = value

        return value

    def clear(self) -> None:
        """Remove every cached value."""
        with self._lock:
            self._cache.clear()

    @staticmethod
    def _key(paths: tuple[Path | str, ...]) -> tuple[str, ...]:
        return tuple(str(Path(p).resolve()) for p in paths)
