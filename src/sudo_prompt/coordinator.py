"""Deduplication of concurrent interactive authorization prompts.

Several requests may need a password at the same time. Requests sharing an
identity token share one prompt: the first becomes the leader and starts the
interactive flow in its own task, later ones wait for the same outcome.

Invariants:
- At most one interactive flow per token is active at any time.
- Looking up a token and registering as waiter or leader happens without
  yielding to the event loop.
- The table entry is removed before any waiter is resumed, so a resumed
  waiter that prompts again starts a fresh flow.
- Waiters are resumed in the order they attached, each exactly once.
- Cancelling a caller, the leader included, drops only that caller's wait.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional

from loguru import logger

from .config import Config
from .errors import PermissionDeniedError, PromptTimeoutError

PromptFlow = Callable[[], Awaitable[None]]


@dataclass
class PendingPrompt:
    """An interactive flow in progress and the callers waiting on it."""

    token: str
    waiters: List[asyncio.Future] = field(default_factory=list)
    task: Optional[asyncio.Task] = None


class PromptCoordinator:
    """
    Run at most one interactive prompt per identity token.

    Features:
    - Leader/follower deduplication keyed by identity token
    - Flow runs in its own task, so cancelling one caller only drops its wait
    - FIFO fan-out of the flow's outcome to every waiter
    - Optional timeout that still drains every waiter exactly once
    """

    def __init__(self, *, timeout: Optional[float] = None):
        self._pending: Dict[str, PendingPrompt] = {}
        self._timeout = timeout if timeout is not None else Config.PROMPT_TIMEOUT
        self.flows_started = 0

    def is_pending(self, token: str) -> bool:
        return token in self._pending

    def pending_tokens(self) -> List[str]:
        return list(self._pending)

    def waiter_count(self, token: str) -> int:
        pending = self._pending.get(token)
        return len(pending.waiters) if pending else 0

    def flow_task(self, token: str) -> Optional[asyncio.Task]:
        """Task running the interactive flow for ``token``, if one is pending."""
        pending = self._pending.get(token)
        return pending.task if pending else None

    async def authorize(self, token: str, flow: PromptFlow) -> None:
        """
        Wait until the user has authorized ``token``.

        Args:
            token: Identity token of the request
            flow: Starts the interactive prompt; only called for the leader

        Raises:
            ElevationError: Whatever the interactive flow raised, for every waiter
            PromptTimeoutError: If the flow exceeded the configured timeout
        """
        waiter = asyncio.get_running_loop().create_future()

        # Critical section: no await between the lookup and the registration.
        pending = self._pending.get(token)
        if pending is not None:
            pending.waiters.append(waiter)
            logger.info(
                f"Prompt already pending for {token}, waiting "
                f"({len(pending.waiters)} waiter(s))"
            )
        else:
            pending = PendingPrompt(token=token, waiters=[waiter])
            self._pending[token] = pending
            self.flows_started += 1
            logger.info(f"Starting interactive prompt for {token}")
            pending.task = asyncio.create_task(self._lead(pending, flow))

        # Cancelling this caller cancels only its own future.
        await waiter

    async def _lead(self, pending: PendingPrompt, flow: PromptFlow) -> None:
        error: Optional[BaseException] = None
        try:
            await self._run_flow(pending, flow)
        except asyncio.CancelledError:
            self._complete(
                pending, PermissionDeniedError("Authorization prompt was cancelled.")
            )
            raise
        except Exception as e:
            error = e

        self._complete(pending, error)

    async def _run_flow(self, pending: PendingPrompt, flow: PromptFlow) -> None:
        if self._timeout is None:
            await flow()
            return
        try:
            await asyncio.wait_for(flow(), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.warning(f"Interactive prompt for {pending.token} timed out after {self._timeout}s")
            raise PromptTimeoutError(
                f"User did not respond within {self._timeout} seconds."
            ) from e

    def _complete(self, pending: PendingPrompt, error: Optional[BaseException]) -> None:
        waiters = pending.waiters
        if self._pending.get(pending.token) is pending:
            del self._pending[pending.token]

        if error is None:
            logger.info(f"Prompt for {pending.token} succeeded, resuming {len(waiters)} waiter(s)")
        else:
            logger.warning(
                f"Prompt for {pending.token} failed, resuming {len(waiters)} waiter(s): {error}"
            )

        for waiter in waiters:
            # A caller cancelled while waiting is skipped.
            if waiter.done():
                continue
            if error is None:
                waiter.set_result(None)
            else:
                waiter.set_exception(error)
