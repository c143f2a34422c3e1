"""
Decorators for the store and the command boundary.

``store_operation`` turns SQLAlchemy failures into ``PersistenceError``;
``command_handler`` turns every outcome of a shell command into a
``CommandResult`` so no exception ever crosses into the desktop shell.
"""

import functools
import inspect
from typing import Any, Awaitable, Callable, Dict, Optional, ParamSpec, TypeVar

import structlog
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from .exceptions import PersistenceError, format_failure, stage_of

logger = structlog.get_logger(__name__)

# Type variables for generic decorator typing
P = ParamSpec("P")
R = TypeVar("R")

# Arguments never written to logs
_SENSITIVE_ARGS = frozenset({"api_key"})


class CommandResult(BaseModel):
    """Structured outcome handed back to the shell."""

    ok: bool
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, data: Any = None) -> "CommandResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "CommandResult":
        return cls(ok=False, error=error)


def _call_context(
    func: Callable[..., Any], args: tuple, kwargs: dict
) -> Dict[str, Any]:
    """Bound call arguments, truncated and with secrets redacted."""
    bound_args = inspect.signature(func).bind(*args, **kwargs)
    bound_args.apply_defaults()

    context: Dict[str, Any] = {}
    for name, value in bound_args.arguments.items():
        if name == "self":
            continue
        if name in _SENSITIVE_ARGS:
            context[name] = "[REDACTED]" if value else None
        elif isinstance(value, (str, int, float, bool)) or value is None:
            # Limit string values to avoid huge log entries
            context[name] = value[:100] if isinstance(value, str) else value
    return context


def store_operation(
    operation_name: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Wrap a store method so database failures surface as PersistenceError.

    :param operation_name: Name recorded on the raised error and in logs
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except SQLAlchemyError as e:
                logger.error(
                    "Store operation failed",
                    operation=operation_name,
                    error_type=e.__class__.__name__,
                    error_message=str(e),
                )
                raise PersistenceError(
                    str(e.orig) if getattr(e, "orig", None) else str(e),
                    operation=operation_name,
                    original_error=e,
                ) from e

        return wrapper

    return decorator


def command_handler(
    command_name: str,
) -> Callable[[Callable[P, Awaitable[Any]]], Callable[P, Awaitable[CommandResult]]]:
    """
    Decorator for shell commands.

    The wrapped coroutine returns its payload; the decorator logs entry and
    completion, wraps the payload in ``CommandResult.success`` and converts
    any exception into ``CommandResult.failure("<stage>: <message>")``.

    :param command_name: Name of the command for logs
    :returns: Decorated coroutine that never raises

    :example:
        @command_handler("get_match_details")
        async def get_match_details(self, match_id: str) -> dict:
            return await self.orchestrator.get_match_details(match_id)
    """

    def decorator(
        func: Callable[P, Awaitable[Any]],
    ) -> Callable[P, Awaitable[CommandResult]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> CommandResult:
            context: Dict[str, Any] = {"command": command_name}

            try:
                context.update(_call_context(func, args, kwargs))
                logger.debug("Command called", **context)
                data = await func(*args, **kwargs)
                logger.debug("Command completed successfully", **context)
                return CommandResult.success(data)

            except Exception as e:
                stage = stage_of(e)
                logger.error(
                    "Command failed",
                    stage=stage.value,
                    error_type=e.__class__.__name__,
                    error_message=str(e),
                    **context,
                )
                return CommandResult.failure(format_failure(e))

        return wrapper

    return decorator
