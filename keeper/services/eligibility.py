"""
Eligibility filter.

Decides whether an inbound pull request event should start the merge
pipeline. Only pull requests opened or updated by a trusted automation
identity qualify.
"""

from typing import Callable, Iterable

from keeper.models.pull_request import Identity, PullRequestEvent

IdentityPredicate = Callable[[Identity], bool]

OPENED = "opened"
SYNCHRONIZE = "synchronize"


def trusted_identities(profile_urls: Iterable[str]) -> IdentityPredicate:
    """
    Build a predicate trusting the given profile URLs.

    Args:
        profile_urls: Allow-listed identity profile URLs

    Returns:
        Predicate that is True for identities whose html_url is allow-listed
    """
    allowed = frozenset(url.rstrip("/") for url in profile_urls)

    def is_trusted(identity: Identity) -> bool:
        return identity.html_url.rstrip("/") in allowed

    return is_trusted


def is_eligible(event: PullRequestEvent, is_trusted: IdentityPredicate) -> bool:
    """
    Check whether an event should trigger validation.

    'opened' events are judged by their sender, 'synchronize' events by the
    pull request author. Every other action is rejected.
    """
    if event.pull_request is None:
        return False

    if event.action == OPENED:
        return is_trusted(event.sender)

    if event.action == SYNCHRONIZE:
        return is_trusted(event.pull_request.user)

    return False
