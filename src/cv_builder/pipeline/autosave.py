"""Debounced autosave with exponential backoff.

States:

* ``idle``     nothing pending
* ``dirty``    a change is waiting for the debounce timer
* ``saving``   a save is running
* ``backoff``  the last save failed; a retry timer is pending
* ``stopped``  too many consecutive failures, or closed; ``resume()`` restarts

The controller owns at most one timer handle at a time. Scheduling always
cancels the previous handle first, so timers never pile up.
"""

from __future__ import annotations

import asyncio
import logging

from cv_builder.config import AutosaveConfig
from cv_builder.pipeline.backoff import BackoffPolicy
from cv_builder.store import DocumentStore

logger = logging.getLogger(__name__)

IDLE = "idle"
DIRTY = "dirty"
SAVING = "saving"
BACKOFF = "backoff"
STOPPED = "stopped"


class AutosaveController:
    """Watches a ``DocumentStore`` and saves its latest snapshot after edits settle."""

    def __init__(
        self,
        store: DocumentStore,
        config: AutosaveConfig | None = None,
        *,
        policy: BackoffPolicy | None = None,
    ):
        config = config or AutosaveConfig()
        self.store = store
        self.debounce_seconds = config.debounce_seconds
        self.policy = policy or BackoffPolicy.from_config(config)
        self.state = IDLE
        self.failures = 0
        self.retry_delay: float | None = None
        self._closed = False
        self._handle: asyncio.TimerHandle | None = None
        self._task: asyncio.Task | None = None
        self._unsubscribe = store.subscribe(self._on_store_event)

    @property
    def has_pending_timer(self) -> bool:
        return self._handle is not None

    # --- events -------------------------------------------------------------

    def _on_store_event(self, event: str, store: DocumentStore) -> None:
        if event == "change":
            self.notify_change()
        elif event in ("load", "reset") and self.state != STOPPED:
            self._cancel_timer()
            self.failures = 0
            self.retry_delay = None
            self.state = IDLE

    def notify_change(self) -> None:
        """Restart the debounce window. Saving and backoff pick up the change later."""
        if self.state in (STOPPED, SAVING, BACKOFF):
            return
        self.state = DIRTY
        self._schedule(self.debounce_seconds)

    # --- timer --------------------------------------------------------------

    def _schedule(self, delay: float) -> None:
        self._cancel_timer()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop (synchronous caller); flush() will save later
            logger.debug("No running loop, autosave deferred")
            return
        self._handle = loop.call_later(delay, self._fire)

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._task = asyncio.ensure_future(self._run_save())

    # --- saving -------------------------------------------------------------

    async def _run_save(self) -> bool:
        self.state = SAVING
        ok = await self.store.save_document()
        if self._closed:
            return ok
        if ok:
            self.failures = 0
            self.retry_delay = None
            if self.store.has_unsaved_changes:
                self.state = DIRTY
                self._schedule(self.debounce_seconds)
            else:
                self.state = IDLE
            return True

        self.failures += 1
        if self.policy.exhausted(self.failures):
            self.state = STOPPED
            logger.error(
                "Autosave stopped after %d consecutive failures: %s",
                self.failures, self.store.error,
            )
            return False
        self.retry_delay = self.policy.delay_for(self.failures)
        self.state = BACKOFF
        logger.warning(
            "Autosave failed (%d/%d), retrying in %.1fs",
            self.failures, self.policy.max_failures, self.retry_delay,
        )
        self._schedule(self.retry_delay)
        return False

    async def _wait_for_running_save(self) -> None:
        if self._task is not None and not self._task.done():
            await self._task

    async def save_now(self) -> bool:
        """Save immediately, skipping any pending debounce or backoff delay."""
        self._cancel_timer()
        await self._wait_for_running_save()
        if not self.store.has_unsaved_changes:
            if self.state != STOPPED:
                self.state = IDLE
            return True
        return await self._run_save()

    async def flush(self) -> bool:
        """Save pending changes, if any. Returns True when nothing is left unsaved."""
        await self._wait_for_running_save()
        if not self.store.has_unsaved_changes:
            self._cancel_timer()
            return True
        return await self.save_now()

    def resume(self) -> None:
        """Leave the stopped state and retry straight away."""
        if self.state != STOPPED or self._closed:
            return
        self.failures = 0
        self.retry_delay = None
        if self.store.has_unsaved_changes:
            self.state = DIRTY
            self._schedule(0)
        else:
            self.state = IDLE

    async def close(self) -> None:
        """Cancel timers, let a running save finish, and stop listening."""
        self._closed = True
        self._cancel_timer()
        await self._wait_for_running_save()
        self._unsubscribe()
        self.state = STOPPED
