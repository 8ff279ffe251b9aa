"""Tests for handler loading and the handler registry."""

from pathlib import Path
from unittest import TestCase
from unittest.mock import MagicMock, patch

from queue_worker.handlers import exception_test, noop
from queue_worker.handlers.registry import HandlerLoadError, HandlerRegistry, build_registry, load_handler

E2E_HANDLERS_DIR = str(Path(__file__).resolve().parent / "e2e_handlers")


class TestHandlerRegistry(TestCase):
    """Tests for HandlerRegistry."""

    def test_resolve_returns_none_when_empty(self):
        registry = HandlerRegistry()
        self.assertFalse(registry.is_registered)
        self.assertIsNone(registry.resolve())

    def test_resolve_calls_factory_each_time(self):
        factory = MagicMock(side_effect=[object(), object()])
        registry = HandlerRegistry()
        registry.register(factory)

        first = registry.resolve()
        second = registry.resolve()

        self.assertIsNot(first, second)
        self.assertEqual(factory.call_count, 2)

    def test_capability_names_base_handler(self):
        self.assertEqual(HandlerRegistry.capability, "BaseHandler")


class TestLoadHandler(TestCase):
    """Tests for load_handler and build_registry."""

    def test_module_path_uses_handler_class(self):
        self.assertIs(load_handler("queue_worker.handlers.noop"), noop.Handler)

    def test_module_and_class_path(self):
        handler_class = load_handler("queue_worker.handlers.exception_test:ValidateHandler")
        self.assertIs(handler_class, exception_test.ValidateHandler)

    def test_handlers_path_is_added_to_sys_path(self):
        handler_class = load_handler("e2e_handler", handlers_path=[E2E_HANDLERS_DIR])
        self.assertEqual(handler_class.__name__, "Handler")

    @patch("queue_worker.handlers.registry.importlib.import_module", side_effect=ImportError("nope"))
    def test_missing_module_raises(self, mock_import):
        with self.assertRaises(HandlerLoadError) as ctx:
            load_handler("handlers.missing")
        self.assertIn("Could not import", str(ctx.exception))
        mock_import.assert_called_with("handlers.missing")

    def test_missing_class_raises(self):
        with self.assertRaises(HandlerLoadError) as ctx:
            load_handler("queue_worker.handlers.noop:Nope")
        self.assertIn("no handler class Nope", str(ctx.exception))

    def test_class_without_handle_raises(self):
        with self.assertRaises(HandlerLoadError) as ctx:
            load_handler("e2e_handler:NotAHandler", handlers_path=[E2E_HANDLERS_DIR])
        self.assertIn("no handle method", str(ctx.exception))

    def test_build_registry_without_handler_is_empty(self):
        self.assertFalse(build_registry(None).is_registered)
        self.assertFalse(build_registry("").is_registered)

    def test_build_registry_resolves_fresh_instances(self):
        registry = build_registry("queue_worker.handlers.noop")
        first = registry.resolve()
        self.assertIsInstance(first, noop.Handler)
        self.assertIsNot(first, registry.resolve())
