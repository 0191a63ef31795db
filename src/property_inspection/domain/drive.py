"""Credentials for the cloud mirror."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DriveCredentials:
    """OAuth credentials of the account that owns the mirror folders."""

    access_token: str
    refresh_token: str | None = None
