"""Credential scrubbing in log records."""

from __future__ import annotations

import logging

from fmms.security.logging_filters import REDACTED, SensitiveFilter, scrub


def _record(msg: str, *args: object) -> logging.LogRecord:
    return logging.LogRecord("fmms", logging.INFO, __file__, 1, msg, args, None)


def test_scrub_bearer_and_passwords() -> None:
    assert scrub("Authorization: Bearer abc.def-ghi") == REDACTED
    assert scrub('{"password": "hunter22"}') == f'{{"{REDACTED}}}'
    assert scrub("username=a@b.c&password=hunter22") == f"username=a@b.c&{REDACTED}"
    assert scrub("nothing to hide") == "nothing to hide"


def test_filter_scrubs_message_and_args() -> None:
    record = _record("login %s %s", '{"access_token": "tok"}', 42)
    assert SensitiveFilter().filter(record) is True
    assert record.getMessage() == f'login {{"{REDACTED}}} 42'
