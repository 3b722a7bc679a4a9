# llm_bridge_toolkit/llm_bridge_toolkit/tools/tool_factory.py
import json
import logging
import inspect
from typing import List, Dict, Any, Callable, Optional

from .models import ToolExecutionResult
from ..types import FunctionDeclaration, Tool

module_logger = logging.getLogger(__name__)


class ToolFactory:
    """
    Manages the definition and dispatching of custom tools (functions)
    that the model can call.
    Exposes the registered tools as function declarations and executes
    them by name with already-parsed arguments.
    """

    def __init__(self):
        self.tools: Dict[str, Callable] = {}
        self.declarations: Dict[str, FunctionDeclaration] = {}
        module_logger.debug("ToolFactory initialized.")

    def register_tool(
        self,
        function: Callable,
        name: Optional[str] = None,
        description: Optional[str] = None,
        parameters: Dict[str, Any] | None = None,
    ):
        """
        Registers a custom tool function and its declaration.

        Args:
            function: The callable to execute. May be sync or async, and may
                return a ``ToolExecutionResult`` or any JSON-serialisable value.
            name: The name the model uses to call the function. Defaults to
                the function's ``__name__``.
            description: Explanation shown to the model. Defaults to the
                function's docstring.
            parameters: JSON Schema object for the function's arguments.
        """
        name = name or function.__name__
        if description is None:
            description = (function.__doc__ or "").strip() or f"Executes the {name} function."
        if name in self.tools:
            module_logger.warning(f"Tool '{name}' is already registered. Overwriting.")
        if parameters is not None and (
            not isinstance(parameters, dict) or str(parameters.get("type", "")).lower() != "object"
        ):
            module_logger.warning(
                "Tool '%s' parameters does not seem to be a valid JSON "
                "Schema object. Ensure it follows the expected format.",
                name,
            )

        self.tools[name] = function
        self.declarations[name] = FunctionDeclaration(
            name=name, description=description, parameters=parameters
        )
        module_logger.info(f"Registered tool: {name}")

    def get_tools(self, filter_tool_names: Optional[List[str]] = None) -> List[Tool]:
        """
        Returns the registered declarations wrapped in a single ``Tool``,
        optionally restricted to ``filter_tool_names``. Empty when nothing matches.
        """
        if filter_tool_names is None:
            declarations = list(self.declarations.values())
        else:
            missing = set(filter_tool_names) - set(self.declarations)
            if missing:
                module_logger.warning(
                    f"Requested tools not found in factory: {sorted(missing)}. They will be excluded."
                )
            declarations = [
                d for n, d in self.declarations.items() if n in set(filter_tool_names)
            ]
        return [Tool(function_declarations=declarations)] if declarations else []

    async def dispatch_tool(
        self, function_name: str, arguments: Dict[str, Any]
    ) -> ToolExecutionResult:
        """
        Executes the named tool with ``arguments`` and returns a
        ``ToolExecutionResult``. Failures are reported through the result's
        ``error`` field, never raised.
        """
        if function_name not in self.tools:
            error_msg = f"Tool '{function_name}' not found."
            module_logger.warning(error_msg)
            return ToolExecutionResult(
                content=json.dumps({"error": error_msg, "status": "tool_not_found"}),
                error=error_msg,
            )

        tool_function = self.tools[function_name]
        try:
            module_logger.debug(
                f"Executing tool '{function_name}' with args: {arguments}"
            )
            if inspect.iscoroutinefunction(tool_function):
                result = await tool_function(**arguments)
            else:
                result = tool_function(**arguments)
                if inspect.isawaitable(result):
                    result = await result
        except Exception as e:
            error_msg = f"Execution failed within tool '{function_name}': {e}"
            module_logger.exception(f"Error during tool execution for {function_name}")
            return ToolExecutionResult(
                content=json.dumps({"error": error_msg, "status": "execution_error"}),
                error=error_msg,
            )

        if isinstance(result, ToolExecutionResult):
            return result
        if isinstance(result, str):
            return ToolExecutionResult(content=result)
        try:
            return ToolExecutionResult(content=json.dumps(result))
        except TypeError:
            module_logger.warning(
                "Tool function '%s' returned a non-serialisable %s; using str().",
                function_name,
                type(result).__name__,
            )
            return ToolExecutionResult(content=str(result))

    @property
    def available_tool_names(self) -> List[str]:
        """Returns a list of all registered tool names."""
        return list(self.tools)
