"""In-process auth gateway for development and tests.

Codes are generated and kept in ``sent_codes`` instead of being texted, and
every call is appended to ``calls``. ``configure(should_succeed=False)``
makes each call raise ``AuthError``, which is how tests simulate the service
being down.
"""

import secrets
from uuid import uuid4

from storefront.session.gateway.port import AuthError, AuthGateway, AuthListener
from storefront.session.identity import AuthSession, Identity


class FakeAuthGateway(AuthGateway):
    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Auth service unavailable"
        self.calls: list[dict] = []
        self.sent_codes: dict[str, str] = {}
        self._users_by_phone: dict[str, Identity] = {}
        self._users_by_email: dict[str, Identity] = {}
        self._passwords: dict[str, str] = {}
        self._tokens: dict[str, Identity] = {}
        self._session: AuthSession | None = None
        self._listeners: list[AuthListener] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Auth service unavailable") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def _record(self, method: str, **kwargs) -> None:
        self.calls.append({"method": method, **kwargs})
        if not self.should_succeed:
            raise AuthError(self.failure_reason)

    def _start_session(self, identity: Identity) -> AuthSession:
        token = f"fake_token_{uuid4().hex}"
        self._tokens[token] = identity
        self._session = AuthSession(access_token=token, identity=identity)
        self._notify("SIGNED_IN", self._session)
        return self._session

    def _notify(self, event: str, session: AuthSession | None) -> None:
        for listener in list(self._listeners):
            listener(event, session)

    def get_session(self) -> AuthSession | None:
        self._record("get_session")
        return self._session

    def sign_in_with_otp(self, phone: str) -> str:
        self._record("sign_in_with_otp", phone=phone)
        self.sent_codes[phone] = f"{secrets.randbelow(10**6):06d}"
        return f"fake_msg_{uuid4().hex[:12]}"

    def verify_otp(self, phone: str, token: str) -> AuthSession:
        self._record("verify_otp", phone=phone)
        if self.sent_codes.get(phone) != token:
            raise AuthError("Invalid verification code")
        del self.sent_codes[phone]

        identity = self._users_by_phone.get(phone)
        if identity is None:
            identity = Identity(id=str(uuid4()), phone=phone)
            self._users_by_phone[phone] = identity
        return self._start_session(identity)

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        self._record("sign_in_with_password", email=email)
        identity = self._users_by_email.get(email)
        if identity is None or self._passwords.get(email) != password:
            raise AuthError("Invalid login credentials")
        return self._start_session(identity)

    def sign_up(self, email: str, password: str) -> AuthSession:
        self._record("sign_up", email=email)
        if email in self._users_by_email:
            raise AuthError("User already registered")

        identity = Identity(id=str(uuid4()), email=email)
        self._users_by_email[email] = identity
        self._passwords[email] = password
        return self._start_session(identity)

    def sign_out(self) -> None:
        self._record("sign_out")
        if self._session is not None:
            self._tokens.pop(self._session.access_token, None)
        self._session = None
        self._notify("SIGNED_OUT", None)

    def get_user(self, access_token: str) -> Identity | None:
        self._record("get_user")
        return self._tokens.get(access_token)

    def on_auth_state_change(self, listener: AuthListener):
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
