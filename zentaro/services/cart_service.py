"""
Cart Store - authoritative in-memory cart with write-through remote sync.

Local state changes synchronously on every call. Remote writes run as
background tasks, dispatched one at a time in the order they were issued,
with a bounded retry. A write that still fails is reported through the
notifier and logged; the local change is kept (no rollback).

Identity transitions replace the cart, they never merge it:
- anonymous: empty cart, remote storage is never read
- user: the remote cart of that user replaces whatever was in memory
"""
from __future__ import annotations

import asyncio
from decimal import Decimal
from functools import partial
from typing import Any, Awaitable, Callable, Optional

from logging_config import logger
from zentaro.core.async_db import AsyncDBProxy
from zentaro.core.config import Settings
from zentaro.core.constants import DEFAULT_CART_SYNC_ATTEMPTS, DEFAULT_CART_SYNC_DELAY
from zentaro.core.db_retry import retry_async
from zentaro.domain.entities import AuthUser, CartItem, CartSnapshot, Product
from zentaro.domain.value_objects import CartStatus
from zentaro.repositories.base import CartRepositoryProtocol

from .auth_session import AuthSession

Notifier = Callable[[str, str], None]

SYNC_FAILED_MESSAGE = "We couldn't save your cart to the server."
LOAD_FAILED_MESSAGE = "We couldn't load your saved cart."


class CartStore:
    """Cart for the current identity of an ``AuthSession``."""

    def __init__(
        self,
        session: AuthSession,
        repository: CartRepositoryProtocol,
        *,
        sync_attempts: int = DEFAULT_CART_SYNC_ATTEMPTS,
        sync_delay: float = DEFAULT_CART_SYNC_DELAY,
        notifier: Optional[Notifier] = None,
    ):
        self._session = session
        self._remote = AsyncDBProxy(repository)
        self._sync_attempts = max(1, sync_attempts)
        self._sync_delay = sync_delay
        self._notifier = notifier

        self._items: dict[str, CartItem] = {}
        self._status = CartStatus.READY
        self._owner_id: str | None = None
        self._generation = 0
        self._deferred: list[Callable[[], None]] = []
        self._load_task: asyncio.Task | None = None
        self._pending: set[asyncio.Task] = set()
        self._write_lock = asyncio.Lock()
        self.sync_failures = 0

        self._unsubscribe = session.subscribe(self._on_identity_change)
        if session.user is not None:
            self._on_identity_change(None, session.user)

    @classmethod
    def from_settings(
        cls,
        session: AuthSession,
        repository: CartRepositoryProtocol,
        settings: Settings,
        notifier: Optional[Notifier] = None,
    ) -> CartStore:
        return cls(
            session,
            repository,
            sync_attempts=settings.cart_sync.attempts,
            sync_delay=settings.cart_sync.initial_delay,
            notifier=notifier,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def status(self) -> CartStatus:
        return self._status

    @property
    def is_ready(self) -> bool:
        return self._status is CartStatus.READY

    @property
    def owner_id(self) -> str | None:
        return self._owner_id

    @property
    def items(self) -> list[CartItem]:
        return list(self._items.values())

    def snapshot(self) -> CartSnapshot:
        return CartSnapshot(tuple(self._items.values()))

    @property
    def total_items(self) -> int:
        return self.snapshot().total_items

    @property
    def total_price(self) -> Decimal:
        return self.snapshot().total_price

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_to_cart(self, product: Product) -> None:
        """Add one unit. Callers must not pass out-of-stock products."""
        if self._defer(self.add_to_cart, product):
            return
        existing = self._items.get(product.id)
        if existing is not None:
            quantity = existing.quantity + 1
            self._items[product.id] = existing.model_copy(update={"quantity": quantity})
            self._notice("info", f"{product.name} quantity increased")
        else:
            quantity = 1
            self._items[product.id] = CartItem.from_product(product, quantity)
            self._notice("info", f"{product.name} added to your cart")
        self._schedule_write("upsert", partial(self._remote_upsert, product.id, quantity))

    def remove_from_cart(self, product_id: str) -> None:
        """Remove an item; removing an absent item is a no-op locally."""
        if self._defer(self.remove_from_cart, product_id):
            return
        item = self._items.pop(product_id, None)
        if item is not None:
            self._notice("info", f"{item.name} removed from your cart")
        self._schedule_write("delete", partial(self._remote_delete, product_id))

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Set an absolute quantity; ``quantity <= 0`` removes the item."""
        if quantity <= 0:
            self.remove_from_cart(product_id)
            return
        if self._defer(self.update_quantity, product_id, quantity):
            return
        existing = self._items.get(product_id)
        if existing is None:
            logger.debug(f"update_quantity ignored: product {product_id} not in cart")
            return
        self._items[product_id] = existing.model_copy(update={"quantity": int(quantity)})
        self._schedule_write("upsert", partial(self._remote_upsert, product_id, int(quantity)))

    def clear_cart(self) -> None:
        if self._defer(self.clear_cart):
            return
        self._items = {}
        self._notice("info", "All items removed from your cart")
        self._schedule_write("clear", self._remote_clear)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def wait_ready(self) -> None:
        """Wait for the in-flight identity load, if any."""
        while self._load_task is not None and not self._load_task.done():
            await asyncio.shield(self._load_task)

    async def flush(self) -> None:
        """Wait until every scheduled remote write has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        self._unsubscribe()
        await self.wait_ready()
        await self.flush()

    # ------------------------------------------------------------------
    # Identity transitions
    # ------------------------------------------------------------------

    def _on_identity_change(self, previous: AuthUser | None, current: AuthUser | None) -> None:
        self._generation += 1
        self._items = {}
        self._deferred.clear()
        self._owner_id = current.id if current else None

        if current is None:
            self._status = CartStatus.READY
            return

        generation = self._generation
        self._status = CartStatus.LOADING
        self._load_task = self._spawn(partial(self._load, current.id, generation))
        if self._load_task is None:
            self._status = CartStatus.READY
            self._notice("warning", LOAD_FAILED_MESSAGE)

    async def _load(self, user_id: str, generation: int) -> None:
        try:
            async with self._write_lock:
                items = await self._remote.load_cart(user_id)
        except Exception as e:
            if generation != self._generation:
                return
            logger.error(f"Failed to load cart for user {user_id}: {e}")
            self._notice("warning", LOAD_FAILED_MESSAGE)
            self._finish_load()
            return

        if generation != self._generation:
            logger.info(f"Discarding stale cart load for user {user_id}")
            return

        loaded: dict[str, CartItem] = {}
        for item in items:
            loaded[item.id] = item
        self._items = loaded
        logger.info(f"Loaded {len(loaded)} cart item(s) for user {user_id}")
        self._finish_load()

    def _finish_load(self) -> None:
        self._status = CartStatus.READY
        deferred, self._deferred = self._deferred, []
        for operation in deferred:
            operation()

    def _defer(self, method: Callable[..., None], *args: Any) -> bool:
        """Queue a mutation made while the identity's cart is still loading."""
        if self._status is not CartStatus.LOADING:
            return False
        self._deferred.append(partial(method, *args))
        return True

    # ------------------------------------------------------------------
    # Remote sync
    # ------------------------------------------------------------------

    def _remote_upsert(self, product_id: str, quantity: int, user_id: str) -> Awaitable[None]:
        return self._remote.upsert_item(user_id, product_id, quantity)

    def _remote_delete(self, product_id: str, user_id: str) -> Awaitable[None]:
        return self._remote.delete_item(user_id, product_id)

    def _remote_clear(self, user_id: str) -> Awaitable[None]:
        return self._remote.clear(user_id)

    def _schedule_write(self, name: str, call: Callable[[str], Awaitable[None]]) -> None:
        user_id = self._owner_id
        if user_id is None:
            return
        task = self._spawn(partial(self._write, name, user_id, call))
        if task is None:
            self.sync_failures += 1
            self._notice("warning", SYNC_FAILED_MESSAGE)

    async def _write(self, name: str, user_id: str, call: Callable[[str], Awaitable[None]]) -> None:
        async with self._write_lock:
            try:
                await retry_async(
                    lambda: call(user_id),
                    name=f"cart.{name}",
                    max_attempts=self._sync_attempts,
                    initial_delay=self._sync_delay,
                )
            except Exception as e:
                self.sync_failures += 1
                logger.warning(
                    f"Cart {name} for user {user_id} was not saved; "
                    f"local and remote carts may now differ: {e}"
                )
                self._notice("warning", SYNC_FAILED_MESSAGE)

    def _spawn(self, factory: Callable[[], Awaitable[None]]) -> asyncio.Task | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; cart remote sync skipped")
            return None
        task = loop.create_task(factory())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def _notice(self, level: str, message: str) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier(level, message)
        except Exception as e:
            logger.error(f"Cart notifier failed: {e}")
