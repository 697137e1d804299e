"""
Typed events for the claim signing workflow.

A claim moves through the system as a sequence of events: each handler
receives one event plus the request's ``Dependencies`` and returns the next
event. Data the handlers compute travels inside the events; infrastructure
(settings, chain reader) travels in ``Dependencies``.

Flow:
    ClaimRequestEvent -> ClaimAuthorizedEvent -> CandidatesSignedEvent
                      \\-> ClaimRejectedEvent (from either step)
"""

import asyncio
import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from ..adapters.bases import ChainReader
from ..adapters.evm.schemas import ClaimValue, PurchaseEvent, ResolvedDomain, SignatureCandidate
from ..config import ClaimSignerSettings
from ..schemas.https import ClaimRequest


class BaseEvent(ABC):
    """Marker base for every event that can travel through the bus."""

    @abstractmethod
    def __repr__(self) -> str:
        pass


# ==================== Trigger ====================

class ClaimRequestEvent(BaseModel, BaseEvent):
    """A parsed claim request awaiting validation."""
    request: ClaimRequest

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        return f"ClaimRequestEvent(to={self.request.recipient_address})"


# ==================== Intermediate ====================

class ClaimAuthorizedEvent(BaseModel, BaseEvent):
    """Purchase (if any) verified; claim payload and domain resolved."""
    claim: ClaimValue
    domain: ResolvedDomain
    purchase: Optional[PurchaseEvent] = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        return f"ClaimAuthorizedEvent(tier={self.claim.tier}, versions={self.domain.versions})"


# ==================== Terminal ====================

class CandidatesSignedEvent(BaseModel, BaseEvent):
    """At least one signature candidate was produced."""
    candidates: List[SignatureCandidate]
    domain: ResolvedDomain
    purchase: Optional[PurchaseEvent] = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        return f"CandidatesSignedEvent(count={len(self.candidates)})"


class ClaimRejectedEvent(BaseModel, BaseEvent):
    """The claim was refused; ``payload`` is the JSON error body."""
    error_code: str
    payload: Dict[str, Any]
    status_code: int = 400

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        return f"ClaimRejectedEvent(error={self.error_code}, status={self.status_code})"


class BreakEvent(BaseModel, BaseEvent):
    """Stops the chain; nothing is dispatched for it."""
    break_reason: str = ""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        return f"BreakEvent(reason={self.break_reason!r})"


@dataclass(frozen=True)
class Dependencies:
    """Per-request infrastructure handed to every handler and hook."""
    settings: ClaimSignerSettings
    chain_reader: ChainReader


# ==================== Bus ====================

EventHandlerFunc = Callable[[BaseEvent, Dependencies], Awaitable[Optional[BaseEvent]]]
EventHookFunc = Callable[[BaseEvent, Dependencies], Awaitable[None]]


def _require_coroutine(func: Callable, kind: str) -> None:
    if not inspect.iscoroutinefunction(func):
        raise TypeError(f"{kind} must be a coroutine function, got {type(func).__name__}")


class EventBus:
    """
    Routes events to hooks and handlers by exact event type.

    Hooks observe an event and return nothing; handlers return the next
    event (or ``None``). Subclasses are not matched to their parents'
    registrations.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[type, List[EventHandlerFunc]] = {}
        self._hooks: Dict[type, List[EventHookFunc]] = {}

    def subscribe(self, event_class: type[BaseEvent], handler: EventHandlerFunc) -> None:
        """
        Add a handler for ``event_class``.

        Several handlers may share an event type; they run concurrently and
        each result continues the chain.

        Raises:
            TypeError: If ``handler`` is not an ``async def`` function.
        """
        _require_coroutine(handler, "Handler")
        self._subscribers.setdefault(event_class, []).append(handler)

    def hook(self, event_class: type[BaseEvent], hook_func: EventHookFunc) -> None:
        """Add a side-effect hook for ``event_class``; hooks run before handlers."""
        _require_coroutine(hook_func, "Hook")
        self._hooks.setdefault(event_class, []).append(hook_func)

    async def dispatch(self, event: BaseEvent, deps: Dependencies) -> AsyncGenerator[Optional[BaseEvent], None]:
        """
        Run the hooks for ``event``, then its handlers.

        Yields:
            Each handler's result in completion order. Nothing when no
            handler is registered.
        """
        event_type = type(event)
        await asyncio.gather(*(hook(event, deps) for hook in self._hooks.get(event_type, [])))

        handlers = self._subscribers.get(event_type)
        if not handlers:
            return

        for pending in asyncio.as_completed([handler(event, deps) for handler in handlers]):
            yield await pending
