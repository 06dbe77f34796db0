"""Fixed-interval poll loop publishing immutable snapshots for the renderer.

The loop and the UI run as separate coroutines. They share one ``PollState``
slot holding a reference to a frozen ``PollSnapshot``; publishing replaces the
reference in a single assignment, so readers always see the records and the
error of the same cycle.
"""

import asyncio
import contextlib
import logging
import threading
from collections.abc import Sequence
from datetime import datetime

from dockerview.collector import ContainerCollector
from dockerview.docker_handler import ContainerListError
from dockerview.models import ContainerRecord, PollSnapshot

logger = logging.getLogger(__name__)


class PollState:
    """Latest published poll result."""

    def __init__(self) -> None:
        self._snapshot = PollSnapshot()

    def latest(self) -> PollSnapshot:
        """Return the most recently published snapshot."""
        return self._snapshot

    def publish(
        self, records: Sequence[ContainerRecord], error: Exception | None = None
    ) -> PollSnapshot:
        """Replace the current snapshot with the result of a new cycle."""
        snapshot = PollSnapshot(
            records=tuple(records),
            error=error,
            cycle=self._snapshot.cycle + 1,
            collected_at=datetime.now(),
        )
        self._snapshot = snapshot
        return snapshot


class Poller:
    """Runs a collection cycle every ``interval_seconds`` and publishes it.

    Parameters
    ----------
    collector : ContainerCollector
        Collector used for each cycle.
    state : PollState
        Slot receiving the published snapshots.
    interval_seconds : float
        Pause between the end of one cycle and the start of the next
        (default: 1.0).
    """

    def __init__(
        self,
        collector: ContainerCollector,
        state: PollState,
        interval_seconds: float = 1.0,
    ):
        self.collector = collector
        self.state = state
        self.interval = interval_seconds
        self._running = False
        self._cancel = threading.Event()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the polling loop."""
        self._running = True
        self._cancel.clear()
        self._task = asyncio.create_task(self._poll_loop())

    async def stop(self) -> None:
        """Stop the polling loop; an in-flight scan stops at the next container."""
        self._running = False
        self._cancel.set()
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def poll_once(self) -> PollSnapshot:
        """Run one cycle in a worker thread and publish its outcome."""
        try:
            records = await asyncio.to_thread(self.collector.collect, self._cancel)
        except ContainerListError as e:
            logger.warning(f"Container listing failed: {e}")
            return self.state.publish([], e)
        except Exception as e:
            logger.exception("Unexpected error during collection cycle")
            return self.state.publish([], e)
        return self.state.publish(records)

    async def _poll_loop(self) -> None:
        """Main loop: collect, publish, wait for the next tick."""
        while self._running:
            await self.poll_once()
            await asyncio.sleep(self.interval)
