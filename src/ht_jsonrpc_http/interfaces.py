"""Transport protocols shared with the other transports of the RPC layer."""
from typing import Any, Callable, Optional, Protocol, runtime_checkable


@runtime_checkable
class ServerTransport(Protocol):
    """Server side: accepts requests and hands them to a dispatch callback."""

    async def listen(self) -> None:
        ...

    async def stop(self) -> None:
        ...


@runtime_checkable
class ClientTransport(Protocol):
    """Client side: issues calls. ``connect``/``disconnect`` may be no-ops."""

    async def connect(self) -> None:
        ...

    async def disconnect(self) -> None:
        ...

    async def call(
        self,
        method: str,
        params: Any = None,
        callback: Optional[Callable[[Any, Any], Any]] = None,
    ) -> Any:
        ...
