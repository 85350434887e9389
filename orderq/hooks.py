"""
Hook registry: fixed pipeline of named extension points.

Question-type modules register handlers; the host runs a hook by passing a
value through every handler in registration order. Each handler's return
value becomes the next handler's input, so a handler that does not own the
value hands it on unchanged.

Usage:
    hooks = HookRegistry()
    hooks.register(ON_INGEST, plugin.answer_submission)
    answer = hooks.run(ON_INGEST, answer)
"""

from typing import Any, Callable, Dict, List

from .core.errors import UnknownHookError

ON_DEFINE = "on_define"
ON_INGEST = "on_ingest"
ON_CONNECT_PRESENTER = "on_connect_presenter"
ON_CONNECT_VIEWER = "on_connect_viewer"

HOOK_NAMES = (ON_DEFINE, ON_INGEST, ON_CONNECT_PRESENTER, ON_CONNECT_VIEWER)

# Handler signature: (value) -> value for the next handler
Handler = Callable[[Any], Any]


class HookRegistry:
    """Registry of named handler chains."""

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = {name: [] for name in HOOK_NAMES}

    def register(self, name: str, handler: Handler) -> None:
        """
        Append handler to the chain of a hook.

        Raises:
            UnknownHookError: If name is not one of HOOK_NAMES
        """
        if name not in self._handlers:
            raise UnknownHookError(f"Unknown hook: {name}")
        self._handlers[name].append(handler)

    def handlers(self, name: str) -> List[Handler]:
        if name not in self._handlers:
            raise UnknownHookError(f"Unknown hook: {name}")
        return list(self._handlers[name])

    def run(self, name: str, value: Any) -> Any:
        """
        Pass value through the hook's handlers in registration order.

        Exceptions raised by a handler propagate and stop the chain.
        """
        for handler in self.handlers(name):
            value = handler(value)
        return value
