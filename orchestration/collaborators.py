"""External collaborators invoked by workflow nodes.

Each collaborator is a small protocol so deployments can plug in their own
implementation. The defaults here are enough to run workflows end to end.
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Dict, Optional, Protocol

import aiohttp

from .exceptions import ApiCallError
from .models import ExecutionContext

logger = logging.getLogger(__name__)


class ActionExecutor(Protocol):
    async def execute(self, action: Any, context: ExecutionContext) -> Any:
        ...


class ApiCaller(Protocol):
    async def call(
        self, endpoint: str, context: ExecutionContext, config: Mapping[str, Any]
    ) -> Optional[Mapping[str, Any]]:
        ...


class Transformer(Protocol):
    async def transform(self, spec: Any, context: ExecutionContext) -> Mapping[str, Any]:
        ...


class MessageSender(Protocol):
    async def send(
        self, channel: str, config: Mapping[str, Any], context: ExecutionContext
    ) -> bool:
        ...


ActionHandler = Callable[[Mapping[str, Any], ExecutionContext], Awaitable[Any]]


class RegistryActionExecutor:
    """Dispatches actions to named async handlers.

    ``action`` is either a handler name or a mapping with a ``type`` key
    naming the handler; the mapping is passed to the handler as its params.
    Unregistered actions are logged and skipped.
    """

    def __init__(self, handlers: Optional[Dict[str, ActionHandler]] = None) -> None:
        self._handlers: Dict[str, ActionHandler] = dict(handlers or {})

    def register(self, name: str, handler: ActionHandler) -> None:
        self._handlers[name] = handler

    async def execute(self, action: Any, context: ExecutionContext) -> Any:
        if isinstance(action, Mapping):
            name, params = action.get("type"), action
        else:
            name, params = action, {}

        handler = self._handlers.get(str(name))
        if handler is None:
            logger.info(f"No handler registered for action {name!r}, skipping")
            return None

        logger.info(f"Executing action {name!r}")
        return await handler(params, context)


class HttpApiCaller:
    """Calls HTTP endpoints with aiohttp.

    Node config keys: ``method`` (default POST), ``headers``, and
    ``resultKey`` to store the response body under a single context key.
    POST/PUT/PATCH send the context as the JSON body, other methods send
    no body.
    """

    def __init__(self, timeout_seconds: float = 30.0) -> None:
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def call(
        self, endpoint: str, context: ExecutionContext, config: Mapping[str, Any]
    ) -> Optional[Mapping[str, Any]]:
        method = str(config.get("method", "POST")).upper()
        headers = dict(config.get("headers") or {})
        body = dict(context) if method in ("POST", "PUT", "PATCH") else None

        logger.info(f"Making API call {method} {endpoint}")
        async with aiohttp.ClientSession(timeout=self._timeout) as session:
            async with session.request(method, endpoint, json=body, headers=headers) as response:
                if response.status >= 400:
                    raise ApiCallError(endpoint, response.status, await response.text())
                if response.content_type == "application/json":
                    data = await response.json()
                else:
                    data = await response.text()

        result_key = config.get("resultKey")
        if result_key:
            return {result_key: data}
        if isinstance(data, Mapping):
            return data
        return {"response": data}


def _resolve_path(context: Mapping[str, Any], path: str) -> Any:
    current: Any = context
    for part in path.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return None
    return current


class MappingTransformer:
    """Builds new context keys from a ``{target: source}`` mapping.

    A source string starting with ``$`` is a (dotted) context path, for
    example ``"$body.email"``. Any other source is used literally.
    """

    async def transform(self, spec: Any, context: ExecutionContext) -> Mapping[str, Any]:
        if not isinstance(spec, Mapping):
            raise TypeError(f"transform spec must be a mapping, got {type(spec).__name__}")

        result: Dict[str, Any] = {}
        for target, source in spec.items():
            if isinstance(source, str) and source.startswith("$"):
                result[target] = _resolve_path(context, source[1:])
            else:
                result[target] = source
        return result


class LoggingMessageSender:
    """Logs email/notification nodes instead of delivering them."""

    def __init__(self) -> None:
        self.sent: list[Dict[str, Any]] = []

    async def send(
        self, channel: str, config: Mapping[str, Any], context: ExecutionContext
    ) -> bool:
        self.sent.append({"channel": channel, "config": dict(config)})
        logger.info(f"🔔 {channel} node message: {config.get('template') or config.get('message') or '-'}")
        return True
