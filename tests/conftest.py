from __future__ import annotations

import pytest

from groupme_bot import Bot

from fakes import FakeSender


@pytest.fixture
def sender() -> FakeSender:
    return FakeSender()


@pytest.fixture
def bot(sender: FakeSender) -> Bot:
    return Bot(bot_id="test-bot", sender=sender)
