"""Tool scheduling: run a batch of tool-call requests and report every outcome."""

from __future__ import annotations

import abc
import asyncio
import logging
from typing import List, Sequence

from ..cancellation import run_until_cancelled
from ..types import FunctionResponse, FunctionResponsePart, FunctionResponsePayload
from .models import CompletedToolCall, ToolCallRequest, ToolCallResponse
from .tool_factory import ToolFactory

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Tool call cancelled by user."


def _response_part(
    request: ToolCallRequest, *, output: str | None = None, error: str | None = None
) -> FunctionResponsePart:
    return FunctionResponsePart(
        function_response=FunctionResponse(
            id=request.call_id,
            name=request.name,
            response=FunctionResponsePayload(output=output, error=error),
        )
    )


def cancelled_tool_call(request: ToolCallRequest) -> CompletedToolCall:
    return CompletedToolCall(
        request=request,
        status="cancelled",
        response=ToolCallResponse(
            call_id=request.call_id,
            response_parts=[_response_part(request, error=CANCELLED_MESSAGE)],
            error=CANCELLED_MESSAGE,
        ),
    )


class ToolScheduler(abc.ABC):
    """Executes batches of tool calls on behalf of the agent loop."""

    @abc.abstractmethod
    async def schedule(
        self, requests: Sequence[ToolCallRequest], signal: asyncio.Event
    ) -> List[CompletedToolCall]:
        """Run *requests* and return one :class:`CompletedToolCall` per request.

        Resolves once the whole batch is done.  Entries still pending when
        *signal* is set must be reported as ``cancelled``.
        """
        ...


class FactoryToolScheduler(ToolScheduler):
    """Runs tool calls through a :class:`ToolFactory`.

    With ``parallel=True`` the batch runs concurrently; results keep the
    request order either way.
    """

    def __init__(self, tool_factory: ToolFactory, *, parallel: bool = False) -> None:
        self.tool_factory = tool_factory
        self.parallel = parallel

    async def _run_one(
        self, request: ToolCallRequest, signal: asyncio.Event
    ) -> CompletedToolCall:
        completed, result = await run_until_cancelled(
            self.tool_factory.dispatch_tool(request.name, dict(request.args)), signal
        )
        if not completed or result is None:
            logger.info("Tool '%s' (%s) cancelled", request.name, request.call_id)
            return cancelled_tool_call(request)

        if result.error:
            logger.warning(
                "Tool '%s' (%s) failed: %s", request.name, request.call_id, result.error
            )
            return CompletedToolCall(
                request=request,
                status="error",
                response=ToolCallResponse(
                    call_id=request.call_id,
                    response_parts=[_response_part(request, error=result.error)],
                    result_display=result.display,
                    error=result.error,
                ),
            )

        return CompletedToolCall(
            request=request,
            status="success",
            response=ToolCallResponse(
                call_id=request.call_id,
                response_parts=[_response_part(request, output=result.content)],
                result_display=result.display if result.display is not None else result.content,
            ),
        )

    async def schedule(
        self, requests: Sequence[ToolCallRequest], signal: asyncio.Event
    ) -> List[CompletedToolCall]:
        logger.info(
            "Scheduling %d tool call(s)%s",
            len(requests),
            " in parallel" if self.parallel else "",
        )
        if self.parallel:
            return list(await asyncio.gather(*[self._run_one(r, signal) for r in requests]))
        return [await self._run_one(r, signal) for r in requests]
