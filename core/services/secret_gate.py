"""Shared-secret authorization for data output requests.

A request is authorized when it carries any one of the secrets configured
on the data output. No sessions and no user accounts are involved.
"""

import secrets
from typing import Any, Iterable

from ..exceptions import AuthorizationError


def authorize(configured_secrets: Iterable[Any], supplied_secret: Any) -> bool:
    """Check a supplied secret against the configured secret set.

    Matching is exact and case-sensitive. Each candidate is compared in
    constant time.

    Args:
        configured_secrets: Secrets from the data output options
        supplied_secret: Secret carried by the request

    Returns:
        True if the supplied secret equals one of the configured secrets
    """
    if not isinstance(supplied_secret, str) or not supplied_secret:
        return False

    supplied = supplied_secret.encode("utf-8")
    matched = False
    for secret in configured_secrets or ():
        if not isinstance(secret, str) or not secret:
            continue
        if secrets.compare_digest(secret.encode("utf-8"), supplied):
            matched = True
    return matched


def require_secret(configured_secrets: Iterable[Any], supplied_secret: Any) -> None:
    """Raise AuthorizationError unless the supplied secret is configured.

    Raises:
        AuthorizationError: If the secret is missing or does not match
    """
    if not authorize(configured_secrets, supplied_secret):
        raise AuthorizationError("Not Authorized")
