"""Multi-round agent loop that alternates model turns with tool execution."""

from __future__ import annotations

import asyncio
import logging
from contextlib import aclosing
from typing import List, Optional, Sequence, Tuple, Union

from ..config import AgentConfig
from ..providers import create_content_generator
from ..providers._base import BaseContentGenerator
from ..tools.models import CompletedToolCall, ToolCallRequest
from ..tools.scheduler import FactoryToolScheduler, ToolScheduler
from ..tools.tool_factory import ToolFactory
from ..types import Part, TextPart
from .events import ToolCallRequestEvent
from .results import (
    AgentResult,
    ContentResult,
    ErrorResult,
    ToolCallOutput,
    ToolCallRecord,
    ToolCallResult,
    log_result,
    process_stream_event,
)
from .session import ChatSession

logger = logging.getLogger(__name__)


class Agent:
    """Drives a model through as many tool-use rounds as it asks for.

    Every run owns a fresh result log and a fresh cancellation signal.
    A round streams one model turn, recording each event in the log and
    collecting tool-call requests; the requests then go to the scheduler
    as one batch and their response parts become the next round's input.
    The run ends when a turn requests no tools, a batch yields no parts,
    the signal is set, or ``max_rounds`` is reached.

    Args:
        config: Agent settings.  Without an explicit *generator* the model,
            api key and endpoint are required and checked immediately.
        generator: Content generator to use instead of the configured one.
        tool_factory: Tools offered to the model.
        scheduler: Tool scheduler; defaults to a sequential
            :class:`FactoryToolScheduler` over *tool_factory*.
    """

    def __init__(
        self,
        config: AgentConfig,
        *,
        generator: Optional[BaseContentGenerator] = None,
        tool_factory: Optional[ToolFactory] = None,
        scheduler: Optional[ToolScheduler] = None,
    ) -> None:
        self.config = config
        if generator is None:
            generator = create_content_generator(
                config.auth_type, config=config.to_bridge_config()
            )
        self.generator = generator
        self.tool_factory = tool_factory or ToolFactory()
        self.scheduler = scheduler or FactoryToolScheduler(self.tool_factory)
        self._results: List[AgentResult] = []
        self._signal = asyncio.Event()
        self.session: Optional[ChatSession] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def results(self) -> Tuple[AgentResult, ...]:
        """The current run's log, oldest entry first."""
        return tuple(self._results)

    @property
    def signal(self) -> asyncio.Event:
        return self._signal

    def cancel(self) -> None:
        """Cancel the current run.  Has no effect on a run started later."""
        self._signal.set()

    async def run(self, user_input: str) -> str:
        """Run the conversation for *user_input* and return the final answer."""
        self._results = []
        self._signal = asyncio.Event()
        tools = self.tool_factory.get_tools()
        self.session = ChatSession(
            self.generator,
            system_instruction=self.config.system_prompt,
            tools=tools or None,
        )
        await self._process_conversation(self.session, [TextPart(text=user_input)])
        return self.get_last_result()

    def get_last_result(self) -> str:
        """Concatenate the trailing run of ``content`` entries (``""`` if none)."""
        texts: List[str] = []
        for result in reversed(self._results):
            if not isinstance(result, ContentResult):
                break
            texts.append(result.content)
        return "".join(reversed(texts))

    def get_all_results(self) -> List[Union[str, AgentResult]]:
        """The log as a transcript: consecutive content entries merged into one string."""
        transcript: List[Union[str, AgentResult]] = []
        for result in self._results:
            if isinstance(result, ContentResult):
                if transcript and isinstance(transcript[-1], str):
                    transcript[-1] += result.content
                else:
                    transcript.append(result.content)
            else:
                transcript.append(result)
        return transcript

    # ------------------------------------------------------------------
    # Rounds
    # ------------------------------------------------------------------

    def _record(self, result: Optional[AgentResult]) -> None:
        if result is None:
            return
        if self.config.log:
            log_result(result)
        self._results.append(result)

    async def _process_conversation(
        self, session: ChatSession, message_parts: Sequence[Part]
    ) -> None:
        parts: List[Part] = list(message_parts)
        rounds = 0
        while parts:
            if self._signal.is_set():
                logger.info("Run cancelled before round %d", rounds + 1)
                return
            if self.config.max_rounds is not None and rounds >= self.config.max_rounds:
                logger.warning("Stopping after max_rounds=%d", self.config.max_rounds)
                return
            rounds += 1
            logger.info("Starting round %d with %d input part(s)", rounds, len(parts))

            requests: List[ToolCallRequest] = []
            async with aclosing(
                session.send_message_stream(parts, self._signal)
            ) as events:
                async for event in events:
                    if self._signal.is_set():
                        break
                    self._record(process_stream_event(event))
                    if isinstance(event, ToolCallRequestEvent):
                        requests.append(event.request)

            if not requests or self._signal.is_set():
                return
            parts = await self._execute_tool_calls(requests)

    async def _execute_tool_calls(
        self, requests: List[ToolCallRequest]
    ) -> List[Part]:
        completed = await self.scheduler.schedule(requests, self._signal)
        next_parts: List[Part] = []
        for call in completed:
            self._fold_outcome(call, next_parts)
        return next_parts

    def _fold_outcome(self, call: CompletedToolCall, next_parts: List[Part]) -> None:
        name = call.request.name
        logger.info("Tool '%s' finished with status %s", name, call.status)
        next_parts.extend(call.response.response_parts)
        if call.status == "success":
            self._record(
                ToolCallResult(
                    tool_call=ToolCallRecord(
                        name=name,
                        args=call.request.args,
                        result=ToolCallOutput(
                            llm_content=call.response.response_parts,
                            return_display=call.response.result_display,
                        ),
                    )
                )
            )
        elif call.status == "error":
            self._record(
                ErrorResult(
                    error=f"Tool '{name}' failed: {call.response.error or 'Unknown error'}"
                )
            )
        else:
            self._record(ErrorResult(error=f"Tool '{name}' was cancelled"))
