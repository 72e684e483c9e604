import logging

from finance_tracker.utils.alerts import TelegramAlertHandler, parse_chat_ids, setup_logging


def test_parse_chat_ids():
    assert parse_chat_ids("123, -1001234567890,,") == [123, -1001234567890]
    assert parse_chat_ids(None) == []


def test_parse_chat_ids_skips_garbage():
    assert parse_chat_ids("12,abc,34") == [12, 34]


def test_handler_without_token_is_disabled():
    handler = TelegramAlertHandler(token="", chat_ids=[1])

    assert not handler.enabled
    handler.emit(logging.LogRecord("x", logging.ERROR, __file__, 1, "boom", None, None))


def test_handler_without_chats_is_disabled():
    assert not TelegramAlertHandler(token="42:TEST", chat_ids=[]).enabled


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    before, level = list(root.handlers), root.level
    try:
        setup_logging("DEBUG")
        once = len(root.handlers)
        setup_logging("DEBUG")

        assert len(root.handlers) == once
        assert root.level == logging.DEBUG
    finally:
        root.handlers = before
        root.setLevel(level)
