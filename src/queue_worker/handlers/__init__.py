from queue_worker.handlers.base import BaseHandler
from queue_worker.handlers.registry import HandlerLoadError, HandlerRegistry, build_registry, load_handler

__all__ = ["BaseHandler", "HandlerLoadError", "HandlerRegistry", "build_registry", "load_handler"]
