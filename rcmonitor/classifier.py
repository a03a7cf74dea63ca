"""
Classification of untrusted users in a batch of recent changes.

A user is untrusted if the batch contains the creation of their user page
(a freshly registered account) or, depending on the policy, if they edited
without an account (user id 0).
"""

import logging
from typing import Dict, Iterable, List, Sequence

from rcmonitor.config import UserPolicy
from rcmonitor.constants import USER_SPACE_PREFIX
from rcmonitor.models import ChangeKind, ChangeRecord


log = logging.getLogger(__name__)


def flag_untrusted_users(
    batch: Iterable[ChangeRecord],
    policy: UserPolicy = UserPolicy.NEW_AND_ANONYMOUS,
) -> List[str]:
    """
    Return the untrusted user names in the order they were first flagged.

    Args:
        batch: Recent changes in feed order
        policy: Whether anonymous authors are flagged as well as new accounts

    Returns:
        Distinct user names
    """
    flagged: Dict[str, None] = {}
    for record in batch:
        # New account: the user page was just created
        if record.kind == ChangeKind.NEW and record.title.startswith(USER_SPACE_PREFIX):
            flagged.setdefault(record.title[len(USER_SPACE_PREFIX):], None)
        if policy.include_anonymous and record.is_anonymous:
            flagged.setdefault(record.user, None)
    # Hidden user names come through as ""; they name no one
    flagged.pop("", None)
    return list(flagged)


def classify(
    batch: Sequence[ChangeRecord],
    policy: UserPolicy = UserPolicy.NEW_AND_ANONYMOUS,
) -> Dict[str, List[ChangeRecord]]:
    """
    Group the changes made by untrusted users, per user.

    Every flagged user gets a bucket, even if none of the batch's changes
    were made by them. Records by users who were never flagged are dropped.
    Within a bucket, records keep their feed order.

    Args:
        batch: Recent changes in feed order
        policy: Which classification rules are active

    Returns:
        Map of user name -> that user's changes
    """
    changes_by_user: Dict[str, List[ChangeRecord]] = {
        user: [] for user in flag_untrusted_users(batch, policy)
    }
    for record in batch:
        bucket = changes_by_user.get(record.user)
        if bucket is not None:
            bucket.append(record)

    log.debug("Classified %d untrusted user(s) from %d change(s).", len(changes_by_user), len(batch))
    return changes_by_user


__all__ = [
    'flag_untrusted_users',
    'classify',
]
