"""The handle returned by every generated API method.

An Invocation carries the constructed request (``req``) from the moment it is
returned, and settles exactly once with either the response body or an error.
It can be consumed in several ways, all of which observe the same outcome:

    >>> call = drive.files.get(fileId="abc123")
    >>> call.req.uri.href
    'https://www.googleapis.com/drive/v2/files/abc123'
    >>> body = await call                       # awaitable
    >>> await call.then(print, log_error)       # promise style
    >>> body = call.result()                    # synchronous
    >>> drive.files.get({"fileId": "abc123"}, callback=lambda err, body: ...)

The network exchange starts the first time the handle is consumed, or right
away when a callback was supplied at call time.
"""

import asyncio
import inspect
from logging import getLogger
from typing import Any, Awaitable, Callable, Generator, Optional, Union

from .._utils._request_spec import RequestDescriptor
from ..models.errors import RequestCancelledError
from ._base_service import BaseService

Callback = Callable[[Optional[BaseException], Any], Any]
Handler = Callable[[Any], Union[Any, Awaitable[Any]]]

logger = getLogger("discovery_client")


class Invocation:
    def __init__(
        self,
        request: Optional[RequestDescriptor],
        service: Optional[BaseService] = None,
        *,
        error: Optional[BaseException] = None,
        callback: Optional[Callback] = None,
    ) -> None:
        self._request = request
        self._service = service
        self._callback = callback
        self._task: Optional["asyncio.Task[Any]"] = None
        self._settled = False
        self._delivered = False
        self._value: Any = None
        self._error: Optional[BaseException] = None

        if request is None:
            self._settle(
                error=error or RuntimeError("Request could not be constructed"),
            )
        elif callback is not None:
            self._start_with_callback()

    @classmethod
    def failed(
        cls, error: BaseException, callback: Optional[Callback] = None
    ) -> "Invocation":
        """A handle for a call whose request could not be constructed."""
        return cls(None, error=error, callback=callback)

    @property
    def req(self) -> Optional[RequestDescriptor]:
        return self._request

    @property
    def request(self) -> Optional[RequestDescriptor]:
        return self._request

    def done(self) -> bool:
        return self._settled

    def exception(self) -> Optional[BaseException]:
        if not self._settled:
            raise asyncio.InvalidStateError("Invocation has not settled yet")
        return self._error

    def _settle(self, value: Any = None, error: Optional[BaseException] = None) -> None:
        if self._settled:
            return
        self._settled = True
        self._value = value
        self._error = error
        if error is not None:
            logger.debug(f"Invocation rejected: {error}")
        self._deliver()

    def _deliver(self) -> None:
        if self._callback is None or self._delivered:
            return
        self._delivered = True
        callback = self._callback
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._run_callback(callback)
        else:
            loop.call_soon(callback, self._error, self._value)

    def _run_callback(self, callback: Callback) -> None:
        # Reported like an event loop reports a failing call_soon callback
        try:
            callback(self._error, self._value)
        except Exception as e:
            logger.error(f"Invocation callback raised: {e!r}", exc_info=True)

    def _outcome(self) -> Any:
        if self._error is not None:
            raise self._error
        return self._value

    def _start_with_callback(self) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # No event loop to schedule on: exchange synchronously
            self._run_sync()
        else:
            self._ensure_task()

    def _ensure_task(self) -> "asyncio.Task[Any]":
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._run_async())
            self._task.add_done_callback(self._on_task_done)
        return self._task

    def _on_task_done(self, task: "asyncio.Task[Any]") -> None:
        if task.cancelled():
            self._settle(error=self._cancelled_error())

    def _cancelled_error(self) -> RequestCancelledError:
        assert self._request is not None
        return RequestCancelledError(
            f"Request cancelled: {self._request.method} {self._request.uri.href}"
        )

    async def _run_async(self) -> Any:
        assert self._request is not None and self._service is not None
        try:
            value = await self._service.send_async(self._request)
        except asyncio.CancelledError:
            self._settle(error=self._cancelled_error())
            raise
        except Exception as e:
            # The outcome lives on the handle; the task itself never fails
            self._settle(error=e)
            return None
        self._settle(value=value)
        return value

    def _run_sync(self) -> None:
        assert self._request is not None and self._service is not None
        try:
            value = self._service.send(self._request)
        except Exception as e:
            self._settle(error=e)
        else:
            self._settle(value=value)

    async def _wait(self) -> Any:
        if self._settled:
            return self._outcome()
        await self._ensure_task()
        return self._outcome()

    def __await__(self) -> Generator[Any, None, Any]:
        return self._wait().__await__()

    def result(self) -> Any:
        """Block until the exchange settles and return the body, or raise its error."""
        if not self._settled:
            if self._task is not None:
                raise RuntimeError(
                    "Invocation is running on an event loop; await it instead"
                )
            self._run_sync()
        return self._outcome()

    async def then(
        self,
        on_fulfilled: Optional[Handler] = None,
        on_rejected: Optional[Handler] = None,
    ) -> Any:
        """Await the outcome and pass it to the matching handler.

        Without a handler for the outcome, the value is returned (or the error
        re-raised) unchanged.
        """
        try:
            value = await self
        except Exception as e:
            if on_rejected is None:
                raise
            return await _maybe_await(on_rejected(e))
        if on_fulfilled is None:
            return value
        return await _maybe_await(on_fulfilled(value))

    async def catch(self, on_rejected: Handler) -> Any:
        return await self.then(None, on_rejected)

    def __repr__(self) -> str:
        if not self._settled:
            state = "pending"
        elif self._error is not None:
            state = "rejected"
        else:
            state = "fulfilled"
        target = self._request.uri.href if self._request else None
        return f"<Invocation {state} {target}>"


async def _maybe_await(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result
