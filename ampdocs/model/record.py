"""Read-only view over a raw record produced by the documentation extractor."""
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, Optional

from .errors import MalformedRecordError


class RecordView(Mapping):
    """Read-only accessor over a dictionary of raw field values.

    When ``known_keys`` is given, the view only exposes those keys. Anything
    else the producer emitted is dropped without complaint so newer exports
    keep working with older models.
    """

    def __init__(self, raw: Mapping[str, Any], known_keys: Optional[Iterable[str]] = None):
        """Initialize the view.

        Args:
            raw: Raw record (mapping of field name to value)
            known_keys: Optional whitelist of keys to expose

        Raises:
            MalformedRecordError: If raw is not a mapping
        """
        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            raise MalformedRecordError(
                f"Expected a mapping for raw record, got {type(raw).__name__}"
            )

        if known_keys is None:
            self._data: Dict[str, Any] = dict(raw)
        else:
            allowed = set(known_keys)
            self._data = {key: value for key, value in raw.items() if key in allowed}

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def has(self, key: str) -> bool:
        """Check whether the raw record carries a value for key."""
        return key in self._data

    def __repr__(self):
        return f"RecordView({self._data!r})"
