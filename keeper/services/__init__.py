"""Business logic services package."""

from keeper.services.github_client import (
    GitHubClient,
    GitHubClientError,
    TransportError,
)
from keeper.services.eligibility import (
    IdentityPredicate,
    is_eligible,
    trusted_identities,
)
from keeper.services.validator import (
    MergeabilityValidator,
    PendingTimeoutError,
)
from keeper.services.merger import (
    MergeExecutor,
    MergeFailureError,
)
from keeper.services.reporter import (
    FailureReporter,
    build_error_comment,
)
from keeper.services.dispatcher import (
    EventDispatcher,
    get_event_dispatcher,
    close_event_dispatcher,
)

__all__ = [
    'GitHubClient',
    'GitHubClientError',
    'TransportError',
    'IdentityPredicate',
    'is_eligible',
    'trusted_identities',
    'MergeabilityValidator',
    'PendingTimeoutError',
    'MergeExecutor',
    'MergeFailureError',
    'FailureReporter',
    'build_error_comment',
    'EventDispatcher',
    'get_event_dispatcher',
    'close_event_dispatcher',
]
