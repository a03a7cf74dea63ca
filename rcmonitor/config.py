"""
Configuration management for rcmonitor.

Provides MonitorConfig dataclass for managing all monitor configuration from
environment variables.
"""

import os
import sys
from dataclasses import dataclass
from enum import Enum

from rcmonitor.constants import DEFAULT_BATCH_SIZE


class UserPolicy(str, Enum):
    """Which accounts count as untrusted."""
    NEW_ONLY = "new"
    NEW_AND_ANONYMOUS = "all"

    @property
    def include_anonymous(self) -> bool:
        return self is UserPolicy.NEW_AND_ANONYMOUS


DEFAULT_USER_AGENT = "rcmonitor/1.0 (recent changes monitor for new and anonymous users)"
DEFAULT_WORKERS = 4


def _positive_int(raw, default: int) -> int:
    """Parse a positive integer, falling back to default if unset or invalid."""
    try:
        value = int((raw or "").strip())
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass
class MonitorConfig:
    """
    Monitor configuration loaded from environment variables.

    All settings are loaded via from_environment() classmethod.
    The API host is required; everything else has a default.

    Attributes:
        api_host: Wiki API host, e.g. "en.wikipedia.org" (RCMONITOR_API_HOST)
        api_path: Wiki API path (default: "/w/")
        scheme: URL scheme (default: "https")
        user_agent: HTTP User-Agent string
        batch_size: Number of recent changes fetched per run (default: 100)
        user_policy: Which accounts are reported (NEW_ONLY/NEW_AND_ANONYMOUS)
        state_dir: Directory holding one watermark file per wiki host
        workers: Maximum concurrent revision fetches (default: 4)
        log_level: Logging level (default: "INFO")
    """
    # Required fields
    api_host: str

    # Optional fields with defaults
    api_path: str = "/w/"
    scheme: str = "https"
    user_agent: str = DEFAULT_USER_AGENT
    batch_size: int = DEFAULT_BATCH_SIZE
    user_policy: UserPolicy = UserPolicy.NEW_AND_ANONYMOUS
    state_dir: str = "."
    workers: int = DEFAULT_WORKERS
    log_level: str = "INFO"

    @property
    def wiki_key(self) -> str:
        """Key under which this wiki's watermark is persisted."""
        return self.api_host

    @classmethod
    def from_environment(cls) -> "MonitorConfig":
        """
        Load configuration from environment variables.

        Environment variables:
            RCMONITOR_API_HOST (required)
            RCMONITOR_API_PATH (optional, default: "/w/")
            RCMONITOR_SCHEME (optional, default: "https")
            RCMONITOR_USER_AGENT (optional)
            RCMONITOR_BATCH_SIZE (optional, default: 100)
            RCMONITOR_USER_POLICY (optional: "new", "all"; default "all")
            RCMONITOR_STATE_DIR (optional, default: ".")
            RCMONITOR_WORKERS (optional, default: 4)
            RCMONITOR_LOG_LEVEL (optional, default: "INFO")

        Returns:
            MonitorConfig instance

        Raises:
            SystemExit: If the API host is not set
        """
        api_host = (os.environ.get("RCMONITOR_API_HOST") or "").strip()
        if not api_host:
            # Print to stderr since logging may not be configured yet
            print(
                "ERROR: Missing required environment variable RCMONITOR_API_HOST.",
                file=sys.stderr
            )
            sys.exit(2)

        policy_raw = (os.environ.get("RCMONITOR_USER_POLICY") or "").strip().lower()
        if policy_raw not in (UserPolicy.NEW_ONLY.value, UserPolicy.NEW_AND_ANONYMOUS.value):
            policy_raw = UserPolicy.NEW_AND_ANONYMOUS.value

        return cls(
            api_host=api_host,
            api_path=os.environ.get("RCMONITOR_API_PATH", "/w/"),
            scheme=os.environ.get("RCMONITOR_SCHEME", "https"),
            user_agent=os.environ.get("RCMONITOR_USER_AGENT", DEFAULT_USER_AGENT),
            batch_size=_positive_int(os.environ.get("RCMONITOR_BATCH_SIZE"), DEFAULT_BATCH_SIZE),
            user_policy=UserPolicy(policy_raw),
            state_dir=os.environ.get("RCMONITOR_STATE_DIR", "."),
            workers=_positive_int(os.environ.get("RCMONITOR_WORKERS"), DEFAULT_WORKERS),
            log_level=os.environ.get("RCMONITOR_LOG_LEVEL", "INFO").upper(),
        )


__all__ = ['UserPolicy', 'MonitorConfig']
