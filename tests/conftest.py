"""Shared fakes for provider, client and session tests."""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from smarttrans.translators.base import TranslationProvider
from smarttrans.translators.language_codes import deepl_code


class ScriptedProvider(TranslationProvider):
    """
    Provider whose outcomes are scripted.

    Each entry in `script` is an exception to raise or a callable
    ``texts -> translations``; when the script runs out, `default` is used.
    Calls are recorded as (texts, target_code, options).
    """

    name = "scripted"

    def __init__(self, script=None, default=None, failing_codes=()):
        self.script = list(script or [])
        self.default = default or (lambda texts: list(texts))
        self.failing_codes = dict(failing_codes)
        self.calls = []

    def language_code(self, language):
        return deepl_code(language)

    def build_request(self, texts, target_code, options):
        return {"texts": list(texts), "target_code": target_code, "options": options}

    def send(self, request):
        self.calls.append((request["texts"], request["target_code"], request["options"]))
        if request["target_code"] in self.failing_codes:
            raise self.failing_codes[request["target_code"]]
        outcome = self.script.pop(0) if self.script else self.default
        if isinstance(outcome, Exception):
            raise outcome
        return outcome(request["texts"])

    def parse_response(self, response):
        return response


@pytest.fixture
def recorded_sleep():
    """Awaitable sleep that only records delays."""
    delays = []

    async def sleep(delay):
        delays.append(delay)

    sleep.delays = delays
    return sleep
