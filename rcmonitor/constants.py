"""
Constants used throughout the rcmonitor codebase.

Centralizes magic strings and API property lists so the transport, the
classifier and the tests agree on them.
"""

# Namespace prefix of user pages; a new page here marks a new account
USER_SPACE_PREFIX = "User:"

# Sentinel lower than any real rcid/logid, meaning "report everything"
NO_MARK = -1

# Number of recent changes fetched per run
DEFAULT_BATCH_SIZE = 100

# Properties requested from list=recentchanges
RC_PROPS = "user|userid|comment|title|ids|sizes|flags|timestamp|loginfo"

# Properties requested from prop=revisions when diffing an edit
REV_PROPS = "ids|timestamp|user|comment|content"


__all__ = [
    'USER_SPACE_PREFIX',
    'NO_MARK',
    'DEFAULT_BATCH_SIZE',
    'RC_PROPS',
    'REV_PROPS',
]
