"""Async action hooks fired by the services after state changes.

Extensions register callbacks for a hook name; services fire them once the
database write has been committed, so handlers always observe durable state.

Usage:
    from vidshare.lib.hooks import action, AFTER_VIDEO_PUBLISH

    @action(AFTER_VIDEO_PUBLISH, priority=5)
    async def announce(video):
        ...

    await hooks.do_action(AFTER_VIDEO_PUBLISH, video)
"""

import asyncio
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass(order=True)
class HookHandler:
    """A registered callback ordered by priority (lower runs first)."""

    priority: int
    callback: Callable = field(compare=False)

    async def call(self, *args: Any, **kwargs: Any) -> Any:
        result = self.callback(*args, **kwargs)
        if asyncio.iscoroutine(result):
            return await result
        return result


class HookRegistry:
    def __init__(self) -> None:
        self._actions: dict[str, list[HookHandler]] = defaultdict(list)

    def add_action(self, hook_name: str, callback: Callable[..., Any], priority: int = 10) -> None:
        self._actions[hook_name].append(HookHandler(priority=priority, callback=callback))
        self._actions[hook_name].sort()

    def remove_action(self, hook_name: str, callback: Callable[..., Any]) -> bool:
        """Remove a callback. Returns True if it was registered."""
        handlers = self._actions.get(hook_name, [])
        for i, handler in enumerate(handlers):
            if handler.callback is callback:
                handlers.pop(i)
                return True
        return False

    def has_action(self, hook_name: str) -> bool:
        return bool(self._actions.get(hook_name))

    async def do_action(self, hook_name: str, *args: Any, **kwargs: Any) -> None:
        """Run every callback registered for ``hook_name`` in priority order."""
        from vidshare.lib.observability import span

        with span(f"hook.action:{hook_name}", hook_name=hook_name):
            for handler in list(self._actions.get(hook_name, [])):
                await handler.call(*args, **kwargs)

    def clear(self) -> None:
        self._actions.clear()


hooks = HookRegistry()


def action(hook_name: str, priority: int = 10) -> Callable[[Callable], Callable]:
    """Decorator that registers the function on the global registry."""

    def decorator(func: Callable) -> Callable:
        hooks.add_action(hook_name, func, priority)
        return func

    return decorator


# Video lifecycle
AFTER_VIDEO_PUBLISH = "after_video_publish"
AFTER_VIDEO_UPDATE = "after_video_update"
AFTER_VIDEO_DELETE = "after_video_delete"

# Engagement
AFTER_COMMENT_ADD = "after_comment_add"
AFTER_LIKE_TOGGLE = "after_like_toggle"
AFTER_SUBSCRIPTION_TOGGLE = "after_subscription_toggle"
