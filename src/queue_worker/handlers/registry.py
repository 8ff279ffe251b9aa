"""Handler registry and loader.

The registry holds a factory registered at startup; the dispatcher asks it
for a fresh handler per message. load_handler imports the handler class
named in configuration.
"""

import importlib
import logging
import os
import sys
from collections.abc import Callable, Iterable

from queue_worker.handlers.base import BaseHandler

logger = logging.getLogger(__name__)

HandlerFactory = Callable[[], BaseHandler]


class HandlerLoadError(Exception):
    """The configured handler could not be imported."""


class HandlerRegistry:
    """Holds at most one handler factory."""

    capability = BaseHandler.__name__

    def __init__(self, factory: HandlerFactory | None = None) -> None:
        self._factory = factory

    def register(self, factory: HandlerFactory) -> None:
        """Register the factory used to build a handler per message, replacing any previous one."""
        self._factory = factory

    @property
    def is_registered(self) -> bool:
        return self._factory is not None

    def resolve(self) -> BaseHandler | None:
        """Build a handler, or return None when nothing is registered."""
        if self._factory is None:
            return None
        return self._factory()


def load_handler(import_path: str, handlers_path: Iterable[str] = ()) -> type[BaseHandler]:
    """Import and return the handler class named by import_path.

    Args:
        import_path: ``package.module`` (uses its ``Handler`` class) or
            ``package.module:ClassName``.
        handlers_path: Directories appended to sys.path before importing.

    Raises:
        HandlerLoadError: If the module or class cannot be found.
    """
    for path in handlers_path:
        if os.path.exists(path) and path not in sys.path:
            sys.path.append(path)

    module_name, _, class_name = import_path.partition(":")
    class_name = class_name or "Handler"
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise HandlerLoadError(f"Could not import handler module {module_name}: {e}") from e

    handler_class = getattr(module, class_name, None)
    if handler_class is None:
        raise HandlerLoadError(f"Module {module_name} has no handler class {class_name}")
    if not callable(getattr(handler_class, "handle", None)):
        raise HandlerLoadError(f"{import_path} has no handle method")
    logger.info("Loaded handler %s.%s", module_name, class_name)
    return handler_class


def build_registry(import_path: str | None, handlers_path: Iterable[str] = ()) -> HandlerRegistry:
    """Return a registry for the configured handler; empty when import_path is unset."""
    registry = HandlerRegistry()
    if import_path:
        registry.register(load_handler(import_path, handlers_path))
    return registry
