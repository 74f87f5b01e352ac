import logging
from typing import Any, Mapping, Optional

from google.genai import types
from pydantic import ValidationError

from cochef.models.schemas import INVALID_ARGUMENTS, FunctionArgs, FunctionCallResult
from cochef.tools.handlers import FunctionContext
from cochef.tools.registry import AVAILABLE_FUNCTIONS

logger = logging.getLogger(__name__)


def parse_function_call(name: Optional[str], arguments: Optional[Mapping[str, Any]]) -> Optional[FunctionArgs]:
    """Typed argument record for a requested call, or None for unknown names and bad arguments."""
    spec = AVAILABLE_FUNCTIONS.get(name or "")
    if spec is None:
        logger.warning(f"Model requested unknown function '{name}'")
        return None

    try:
        return spec.args_model.model_validate(dict(arguments or {}))
    except ValidationError as e:
        logger.warning(f"Invalid arguments for {name}: {e.errors(include_url=False)}")
        return None


def dispatch(name: Optional[str], arguments: Optional[Mapping[str, Any]], context: FunctionContext) -> FunctionCallResult:
    """
    Runs the handler registered for ``name``.

    Never raises: unknown functions and invalid arguments give the
    "Invalid function arguments" result, handler errors a failed result with
    a description.
    """
    args = parse_function_call(name, arguments)
    if args is None:
        return INVALID_ARGUMENTS

    logger.info(f"--- Calling Tool: {name} with args: {args.model_dump(by_alias=True)} ---")
    try:
        result = AVAILABLE_FUNCTIONS[name].handler(args, context)
    except Exception as e:
        logger.exception(f"Tool {name} failed")
        return FunctionCallResult(success=False, message=f"{name} failed: {e}")

    logger.info(f"--- Tool Response: {result.success} {result.message} ---")
    return result


def call_function(function_call: types.FunctionCall, context: FunctionContext) -> tuple[FunctionCallResult, types.Content]:
    """Dispatches a Gemini function call and wraps the result as the tool turn to send back."""
    result = dispatch(function_call.name, function_call.args, context)

    tool_response = types.Content(
        role="tool",
        parts=[
            types.Part(
                function_response=types.FunctionResponse(
                    name=function_call.name,
                    response=result.to_response(),
                )
            )
        ],
    )
    return result, tool_response
