"""Shared-secret check for the cron trigger."""

from typing import Optional


def is_authorized(
    auth_header: Optional[str],
    secret_param: Optional[str],
    cron_secret: Optional[str],
) -> bool:
    """
    Check a request's credentials against the configured cron secret.

    Accepts either an ``Authorization: Bearer <secret>`` header or a
    ``?secret=<secret>`` query parameter (trimmed before comparison, for
    calls made straight from a browser address bar).

    An unset or empty secret never authorizes anything.
    """
    if not cron_secret:
        return False

    header_ok = auth_header == f"Bearer {cron_secret}"

    secret = secret_param.strip() if secret_param is not None else ""
    query_ok = bool(secret) and secret == cron_secret

    return header_ok or query_ok
