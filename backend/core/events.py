"""
Observer list used for host-driven triggers (camera button, voice query).

Handlers run in registration order. A handler that returns a coroutine is
scheduled as a task on the running loop, and ``invoke`` hands those tasks
back so callers can wait on them if they need to.
"""
import asyncio
import inspect
from typing import Any, Callable, List


class Event:
    def __init__(self, name: str):
        self.name = name
        self._handlers: List[Callable[..., Any]] = []

    def add(self, handler: Callable[..., Any]) -> Callable[..., Any]:
        self._handlers.append(handler)
        return handler

    def remove(self, handler: Callable[..., Any]) -> None:
        self._handlers.remove(handler)

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def invoke(self, *args: Any) -> List[asyncio.Task]:
        tasks = []
        for handler in list(self._handlers):
            result = handler(*args)
            if inspect.isawaitable(result):
                tasks.append(asyncio.ensure_future(result))
        return tasks

    def __repr__(self) -> str:
        return f"Event({self.name!r}, handlers={len(self._handlers)})"
