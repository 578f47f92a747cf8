"""CRUD backends: the in-memory mock and the remote HTTP implementation.

Both satisfy the same async interface; a service holds exactly one of them,
chosen once at startup.
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from structlog.contextvars import bound_contextvars

from case_manager.context import AppContext
from case_manager.entities import EntityKind
from case_manager.errors import ApiError, NotFoundError
from case_manager.http_client import ApiClient
from case_manager.logging_config import get_logger

logger = get_logger(__name__)

DELETE_SUCCESS = {"success": True}


class Backend(ABC):
    """Async CRUD contract for one entity type."""

    def __init__(self, kind: EntityKind):
        self.kind = kind

    @abstractmethod
    async def get_all(self) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def get_by_id(self, record_id: Any) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def update(self, record_id: Any, fields: Dict[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def delete(self, record_id: Any) -> Dict[str, bool]:
        ...

    def not_found(self, record_id: Any) -> NotFoundError:
        logger.warning("record_not_found", entity=self.kind.name, entity_id=record_id)
        return NotFoundError(self.kind.label, record_id)


class MockBackend(Backend):
    """
    In-memory backend with simulated latency.

    Each operation awaits the context delay once, then does all of its
    reading and writing without suspending. Id allocation is therefore never
    interleaved, and concurrent updates to one record are last-write-wins.
    """

    def __init__(self, kind: EntityKind, context: AppContext):
        super().__init__(kind)
        self.context = context
        self.store = context.store(kind.name)

    async def get_all(self):
        await self.context.delay()
        return self.store.all()

    async def get_by_id(self, record_id):
        await self.context.delay()
        record = self.store.get(record_id)
        if record is None:
            raise self.not_found(record_id)
        return record

    async def create(self, fields):
        await self.context.delay()
        allocator = self.context.allocator
        existing = None if allocator.is_seeded(self.kind.name) else self.store.all()
        record_id = allocator.allocate(self.kind.name, existing=existing)
        record = self.kind.new_record(record_id, fields, len(self.store), self.context.clock())
        created = self.store.append(record)
        with bound_contextvars(entity=self.kind.name):
            logger.info("record_created", entity_id=record_id)
        return created

    async def update(self, record_id, fields):
        await self.context.delay()
        index = self.store.index_of(record_id)
        if index is None:
            raise self.not_found(record_id)
        current = self.store.at(index)
        merged = {**current, **fields, "id": current["id"]}
        self.kind.touch(merged, self.context.clock())
        with bound_contextvars(entity=self.kind.name):
            logger.info("record_updated", entity_id=current["id"], fields=sorted(fields))
        return self.store.replace(index, merged)

    async def delete(self, record_id):
        await self.context.delay()
        index = self.store.index_of(record_id)
        if index is None:
            raise self.not_found(record_id)
        removed = self.store.remove(index)
        with bound_contextvars(entity=self.kind.name):
            logger.info("record_deleted", entity_id=removed["id"])
        return dict(DELETE_SUCCESS)


class RemoteBackend(Backend):
    """
    HTTP backend. Bodies come back exactly as the server sent them; the only
    thing synthesized client-side is the delete success marker.

    requests is blocking, so each call runs in a worker thread.
    """

    def __init__(self, kind: EntityKind, client: ApiClient):
        super().__init__(kind)
        self.client = client

    async def _call(
        self,
        endpoint: str,
        method: str = "GET",
        body: Optional[Any] = None,
        record_id: Optional[Any] = None,
    ) -> Any:
        try:
            # to_thread copies the context, so the client's log lines carry the entity
            with bound_contextvars(entity=self.kind.name):
                return await asyncio.to_thread(self.client.request, endpoint, method, body)
        except ApiError as e:
            if record_id is not None and e.status_code == 404:
                raise self.not_found(record_id) from e
            raise

    def _item_endpoint(self, record_id: Any) -> str:
        return f"{self.kind.endpoint}/{record_id}"

    async def get_all(self):
        return await self._call(self.kind.endpoint)

    async def get_by_id(self, record_id):
        return await self._call(self._item_endpoint(record_id), record_id=record_id)

    async def create(self, fields):
        return await self._call(self.kind.endpoint, "POST", fields)

    async def update(self, record_id, fields):
        return await self._call(self._item_endpoint(record_id), "PUT", fields, record_id=record_id)

    async def delete(self, record_id):
        await self._call(self._item_endpoint(record_id), "DELETE", record_id=record_id)
        return dict(DELETE_SUCCESS)
