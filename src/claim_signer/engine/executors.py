"""
Event chain runner.

Feeds an initial event into the ``EventBus`` and follows every returned
event depth-first until handlers stop producing new ones or a ``BreakEvent``
appears.
"""

import asyncio
from typing import AsyncGenerator

from .events import BaseEvent, BreakEvent, Dependencies, EventBus


class _ChainFailure:
    """Queue marker carrying a handler exception to the consumer."""

    def __init__(self, error: BaseException) -> None:
        self.error = error


_DONE = object()


class EventChain:
    """
    Runs one claim through the bus and streams the events it produces.

    A handler or hook exception stops the chain; it is re-raised from
    ``execute()`` after the events produced before it have been yielded.

    Example:
        chain = EventChain(event_bus, deps)
        async for event in chain.execute(ClaimRequestEvent(request=request)):
            ...
    """

    def __init__(self, event_bus: EventBus, deps: Dependencies) -> None:
        self.event_bus = event_bus
        self.deps = deps

    async def execute(self, initial_event: BaseEvent) -> AsyncGenerator[BaseEvent, None]:
        """
        Start the chain at ``initial_event``.

        The initial event itself is not yielded.

        Raises:
            Exception: Whatever a handler or hook raised.
        """
        queue: asyncio.Queue = asyncio.Queue()

        async def produce() -> None:
            try:
                async for event in self._follow(initial_event):
                    await queue.put(event)
            except Exception as e:
                await queue.put(_ChainFailure(e))
            finally:
                await queue.put(_DONE)

        producer = asyncio.create_task(produce())

        failure = None
        while True:
            item = await queue.get()
            if item is _DONE:
                break
            if isinstance(item, _ChainFailure):
                failure = item.error
            else:
                yield item

        await producer
        if failure is not None:
            raise failure

    async def _follow(self, event: BaseEvent) -> AsyncGenerator[BaseEvent, None]:
        if isinstance(event, BreakEvent):
            return

        async for result in self.event_bus.dispatch(event, self.deps):
            if result is None:
                continue
            if not isinstance(result, BaseEvent):
                raise TypeError(f"Handler returned {type(result).__name__}, expected an event")
            yield result
            async for follow_up in self._follow(result):
                yield follow_up
