"""Auth gateway factory.

``get_gateway()`` returns the process-wide adapter (a ``FakeAuthGateway``
until something else is installed with ``set_gateway()``).
"""

from storefront.session.gateway.fake_adapter import FakeAuthGateway
from storefront.session.gateway.port import AuthError, AuthGateway

__all__ = ["AuthError", "AuthGateway", "FakeAuthGateway", "get_gateway", "reset_gateway", "set_gateway"]

_current_gateway: AuthGateway | None = None


def get_gateway() -> AuthGateway:
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = FakeAuthGateway()
    return _current_gateway


def set_gateway(gateway: AuthGateway) -> None:
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    global _current_gateway
    _current_gateway = None
