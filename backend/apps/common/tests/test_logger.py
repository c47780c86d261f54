import logging
import unittest

from apps.common.logger import AppLogger, get_logger


class AppLoggerTests(unittest.TestCase):
    def test_bind_merges_context_without_mutating_parent(self):
        parent = get_logger("tests.logger").bind(component="carts")
        child = parent.bind(user_id=3)
        self.assertEqual(parent.context, {"component": "carts"})
        self.assertEqual(child.context, {"component": "carts", "user_id": 3})

    def test_render_quotes_strings_with_spaces(self):
        line = AppLogger.render("Cart updated", {"user_id": 7, "message": "two words", "ok": True})
        self.assertEqual(line, "Cart updated | user_id=7 message='two words' ok=True")

    def test_render_without_context_returns_message(self):
        self.assertEqual(AppLogger.render("plain", {}), "plain")

    def test_emits_through_stdlib_logger(self):
        log = get_logger("tests.logger.emit").bind(layer="service")
        with self.assertLogs("tests.logger.emit", level=logging.INFO) as captured:
            log.info("Entry added", product_id=4)
        self.assertEqual(captured.output, ["INFO:tests.logger.emit:Entry added | layer=service product_id=4"])
