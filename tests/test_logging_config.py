import logging

from medix.logging_config import RedactKeyFilter


def _record(msg, *args):
    return logging.LogRecord("httpx", logging.INFO, __file__, 1, msg, args, None)


class TestRedactKeyFilter:
    def test_masks_key_query_param(self):
        record = _record(
            'HTTP Request: POST %s "HTTP/1.1 200 OK"',
            "https://example.test/v1beta/models/m:generateContent?key=secret123&alt=json",
        )

        assert RedactKeyFilter().filter(record) is True
        message = record.getMessage()
        assert "secret123" not in message
        assert "?key=***&alt=json" in message

    def test_leaves_other_messages_alone(self):
        record = _record("Generative call succeeded via %s", "groq")
        RedactKeyFilter().filter(record)
        assert record.args == ("groq",)
        assert record.getMessage() == "Generative call succeeded via groq"
