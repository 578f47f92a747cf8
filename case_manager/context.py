"""Application context: the state mock mode runs on.

One AppContext is built at the application root and handed to every mock
backend. Nothing in the package keeps module-level stores or counters, so
tests get isolation by building (or resetting) their own context.
"""
import asyncio
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional

from case_manager import config
from case_manager import seed_data
from case_manager.id_allocator import IdAllocator
from case_manager.store import EntityStore

Clock = Callable[[], datetime]
Delay = Callable[[], Awaitable[None]]


def utc_now() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(UTC)


def sleep_delay(seconds: float) -> Delay:
    """Build a delay coroutine function that sleeps ``seconds``."""
    async def _delay() -> None:
        await asyncio.sleep(seconds)
    return _delay


async def no_delay() -> None:
    """Zero-latency delay for tests."""
    return None


SEEDS: Dict[str, Callable[[], Iterable[Dict[str, Any]]]] = {
    "appointment": seed_data.appointment_records,
    "case": seed_data.case_records,
    "client": seed_data.client_records,
}


@dataclass
class AppContext:
    """Allocator, stores, clock and simulated latency shared by mock backends."""

    allocator: IdAllocator = field(default_factory=IdAllocator)
    stores: Dict[str, EntityStore] = field(default_factory=dict)
    clock: Clock = utc_now
    delay: Delay = field(default_factory=lambda: sleep_delay(config.MOCK_DELAY_SECONDS))

    def store(self, entity_type: str) -> EntityStore:
        """Get (or lazily create an empty) store for ``entity_type``."""
        if entity_type not in self.stores:
            self.stores[entity_type] = EntityStore(entity_type)
        return self.stores[entity_type]

    def load(self, entity_type: str, records: Iterable[Dict[str, Any]]) -> EntityStore:
        """Fill a store and seed its id counter from the loaded records."""
        store = self.store(entity_type)
        store.load(records)
        self.allocator.seed(entity_type, store.all())
        return store

    def reset(self, entity_type: Optional[str] = None) -> None:
        """
        Empty stores and drop id counters.

        Args:
            entity_type: Only reset this type, or everything when None
        """
        if entity_type is None:
            for store in self.stores.values():
                store.clear()
            self.allocator.reset_all()
            return
        self.store(entity_type).clear()
        self.allocator.reset(entity_type)


def build_context(
    seed: bool = True,
    clock: Optional[Clock] = None,
    delay: Optional[Delay] = None,
) -> AppContext:
    """
    Create the application context.

    Args:
        seed: Load the demo datasets into the stores (and counters)
        clock: Timestamp source, defaults to UTC now
        delay: Simulated latency, defaults to MOCK_DELAY_SECONDS of sleep

    Returns:
        Ready-to-use AppContext
    """
    context = AppContext()
    if clock is not None:
        context.clock = clock
    if delay is not None:
        context.delay = delay
    for entity_type, records in SEEDS.items():
        if seed:
            context.load(entity_type, records())
        else:
            context.store(entity_type)
    return context
