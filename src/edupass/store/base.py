"""Store protocol and the in-memory implementation."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Protocol, runtime_checkable

from ..ledger.models import DataKey, KeyKind


@runtime_checkable
class LedgerStore(Protocol):
    """Typed key-value storage backing one ledger instance.

    Values are ``int`` for CREDITS and TOTAL_ISSUED, ``str`` for ADMIN and
    :class:`~edupass.ledger.models.Allocation` for ALLOCATIONS.
    """

    def get(self, key: DataKey, default: Any = None) -> Any: ...

    def set(self, key: DataKey, value: Any) -> None: ...

    def has(self, key: DataKey) -> bool: ...

    def items(self, kind: KeyKind) -> list[tuple[str, Any]]: ...

    def transaction(self): ...


class MemoryStore:
    """Dict-backed store. Transactions snapshot and restore on failure."""

    def __init__(self):
        self._data: dict[DataKey, Any] = {}
        self._depth = 0

    def get(self, key: DataKey, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: DataKey, value: Any) -> None:
        self._data[key] = value

    def has(self, key: DataKey) -> bool:
        return key in self._data

    def items(self, kind: KeyKind) -> list[tuple[str, Any]]:
        return sorted(
            (key.account or "", value) for key, value in self._data.items() if key.kind == kind
        )

    @contextmanager
    def transaction(self) -> Iterator[MemoryStore]:
        snapshot = dict(self._data) if self._depth == 0 else None
        self._depth += 1
        try:
            yield self
        except BaseException:
            if snapshot is not None:
                self._data = snapshot
            raise
        finally:
            self._depth -= 1
