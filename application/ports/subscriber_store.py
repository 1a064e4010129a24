"""Store port consumed by both transport adapters.

Each method is a single independent call into the store: one unit of work,
no transaction spanning two calls, no retries. Outcomes are explicit:

- a value (or ``True``) means the record was found/affected,
- ``None`` (or ``False``) means "not found", which is not an error,
- any failure is raised and left for the transport layer to map.
"""
from __future__ import annotations

from typing import Optional, Protocol, Sequence, runtime_checkable

from domain.subscriber.entity import SubscriberEntry


@runtime_checkable
class SubscriberStore(Protocol):
    async def create_if_absent(self) -> None:
        """Idempotent schema initialization, called once before serving."""
        ...

    async def create(self, email: str) -> None:
        ...

    async def get_one(self, email: str) -> Optional[SubscriberEntry]:
        ...

    async def update(self, entry: SubscriberEntry) -> bool:
        """Update ``confirmed_at``/``opt_out`` of the row keyed by ``entry.email``."""
        ...

    async def delete(self, email: str) -> bool:
        ...

    async def get_page(self, page: int, count: int) -> Sequence[SubscriberEntry]:
        """Zero-based page of entries ordered by id."""
        ...

    async def aclose(self) -> None:
        ...
