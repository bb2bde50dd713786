"""Bearer-token resolution for API requests.

Demo identities use ``demo:<identity id>`` tokens since they never hold an
auth-service session; any other token is looked up through the gateway.
"""

import structlog
from fastapi import Header

from storefront.session.demo import DemoAccounts
from storefront.session.gateway import get_gateway
from storefront.session.gateway.port import AuthError
from storefront.session.identity import Identity
from storefront.session.provider import SessionProvider

logger = structlog.get_logger(__name__)

DEMO_TOKEN_PREFIX = "demo:"


def demo_token(identity_id: str) -> str:
    return f"{DEMO_TOKEN_PREFIX}{identity_id}"


def resolve_token(token: str | None) -> Identity | None:
    if not token:
        return None
    if token.startswith(DEMO_TOKEN_PREFIX):
        account = DemoAccounts().by_id(token[len(DEMO_TOKEN_PREFIX):])
        return account.identity() if account else None
    try:
        return get_gateway().get_user(token)
    except AuthError as exc:
        logger.warning("Token lookup failed", error=str(exc))
        return None


def current_session(authorization: str = Header(default="")) -> SessionProvider:
    scheme, _, token = authorization.partition(" ")
    identity = resolve_token(token.strip()) if scheme.lower() == "bearer" else None
    return SessionProvider.for_identity(identity)
