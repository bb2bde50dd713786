"""Auth gateway port.

The contract the session provider needs from a hosted auth service: phone
OTP, email/password, the current session and change notifications.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from storefront.session.identity import AuthSession, Identity

# listener(event, session); event is "SIGNED_IN" or "SIGNED_OUT"
AuthListener = Callable[[str, AuthSession | None], None]


class AuthError(Exception):
    """The auth service refused a request or could not be reached."""


class AuthGateway(ABC):
    @abstractmethod
    def get_session(self) -> AuthSession | None:
        """Return the session the service currently holds, if any."""
        ...

    @abstractmethod
    def sign_in_with_otp(self, phone: str) -> str:
        """Send a one-time code to ``phone``; return the message id."""
        ...

    @abstractmethod
    def verify_otp(self, phone: str, token: str) -> AuthSession: ...

    @abstractmethod
    def sign_in_with_password(self, email: str, password: str) -> AuthSession: ...

    @abstractmethod
    def sign_up(self, email: str, password: str) -> AuthSession: ...

    @abstractmethod
    def sign_out(self) -> None: ...

    @abstractmethod
    def get_user(self, access_token: str) -> Identity | None:
        """Resolve a bearer token to its identity."""
        ...

    @abstractmethod
    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unregisters it."""
        ...
