"""Unit tests for the eligibility filter."""

import pytest

from keeper.models.pull_request import Identity
from keeper.services.eligibility import is_eligible, trusted_identities

BOT_URL = "https://github.com/greenkeeperio-bot"
HUMAN_URL = "https://github.com/octocat"


@pytest.fixture
def is_trusted():
    return trusted_identities([BOT_URL])


def test_trusted_identities_matches_profile_url(is_trusted):
    assert is_trusted(Identity(html_url=BOT_URL)) is True
    assert is_trusted(Identity(html_url=BOT_URL + "/")) is True
    assert is_trusted(Identity(html_url=HUMAN_URL)) is False


def test_opened_by_trusted_sender_is_eligible(event_factory, is_trusted):
    event = event_factory(action="opened", sender=BOT_URL, author=HUMAN_URL)
    assert is_eligible(event, is_trusted) is True


def test_opened_by_untrusted_sender_is_rejected(event_factory, is_trusted):
    event = event_factory(action="opened", sender=HUMAN_URL, author=BOT_URL)
    assert is_eligible(event, is_trusted) is False


def test_synchronize_judged_by_pull_request_author(event_factory, is_trusted):
    pushed_by_human = event_factory(action="synchronize", sender=HUMAN_URL, author=BOT_URL)
    bot_pushed_to_human_pr = event_factory(action="synchronize", sender=BOT_URL, author=HUMAN_URL)

    assert is_eligible(pushed_by_human, is_trusted) is True
    assert is_eligible(bot_pushed_to_human_pr, is_trusted) is False


@pytest.mark.parametrize("action", ["closed", "reopened", "edited", "labeled"])
def test_other_actions_are_rejected(event_factory, is_trusted, action):
    event = event_factory(action=action, sender=BOT_URL, author=BOT_URL)
    assert is_eligible(event, is_trusted) is False


def test_event_without_pull_request_is_rejected(is_trusted):
    from keeper.models.pull_request import PullRequestEvent

    event = PullRequestEvent(action="opened", sender=Identity(html_url=BOT_URL))
    assert is_eligible(event, is_trusted) is False


def test_predicate_is_injectable(event_factory):
    """Test that any predicate can stand in for the allow-list."""
    event = event_factory(action="opened", sender=HUMAN_URL)
    assert is_eligible(event, lambda identity: identity.html_url == HUMAN_URL) is True
