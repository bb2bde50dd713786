"""Session provider: the single slot holding who is signed in.

Demo accounts sign in locally: their identity is synthesized, persisted in
the ``IdentityStore`` and never sent to the auth service. Every other
credential goes to the ``AuthGateway`` untouched.

After each identity change the admin flag is re-read from the profile
record, and then subscribers (the cart, for one) are told about the new
identity. Changes are applied in arrival order; the last one wins.
"""

from collections.abc import Callable

import structlog
from protean.utils.globals import current_domain

from storefront.account.profile import UpsertProfile
from storefront.account.queries import is_admin
from storefront.session.demo import DEMO_MESSAGE_ID, DemoAccount, DemoAccounts
from storefront.session.gateway import get_gateway
from storefront.session.gateway.port import AuthError, AuthGateway
from storefront.session.identity import AuthSession, Identity
from storefront.session.store import IdentityStore, MemoryIdentityStore
from storefront.session.validation import normalize_phone, validate_code, validate_credentials

logger = structlog.get_logger(__name__)

IdentityListener = Callable[[Identity | None], None]


class SessionProvider:
    def __init__(
        self,
        gateway: AuthGateway | None = None,
        store: IdentityStore | None = None,
        demo_accounts: DemoAccounts | None = None,
    ) -> None:
        self.gateway = gateway or get_gateway()
        self.store = store or MemoryIdentityStore()
        self.demo = demo_accounts or DemoAccounts()
        self.identity: Identity | None = None
        self.is_admin: bool = False
        self.loading: bool = True
        self._listeners: list[IdentityListener] = []
        self._unsubscribe_gateway: Callable[[], None] | None = None

    @classmethod
    def for_identity(cls, identity: Identity | None, gateway: AuthGateway | None = None) -> "SessionProvider":
        """A provider already holding ``identity``, as used per HTTP request."""
        provider = cls(gateway=gateway)
        provider._set_identity(identity)
        provider.loading = False
        return provider

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def start(self) -> Identity | None:
        """Restore the identity from the auth service, else the demo slot."""
        try:
            session = self.gateway.get_session()
        except AuthError as exc:
            logger.warning("Could not read auth session", error=str(exc))
            session = None

        identity = session.identity if session else self.store.load()
        self._set_identity(identity)

        if self._unsubscribe_gateway is None:
            self._unsubscribe_gateway = self.gateway.on_auth_state_change(self._on_gateway_change)
        self.loading = False
        return self.identity

    def close(self) -> None:
        if self._unsubscribe_gateway is not None:
            self._unsubscribe_gateway()
            self._unsubscribe_gateway = None
        self._listeners.clear()

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------
    # Phone OTP
    # -------------------------------------------------------------------
    def request_code(self, phone: str) -> str:
        phone = normalize_phone(phone)
        if self.demo.by_phone(phone) is not None:
            return DEMO_MESSAGE_ID
        return self.gateway.sign_in_with_otp(phone)

    def verify_code(self, phone: str, code: str, display_name: str | None = None) -> Identity:
        phone = normalize_phone(phone)
        code = validate_code(code)

        account = self.demo.match_code(phone, code)
        if account is not None:
            return self._sign_in_demo(account)

        session = self.gateway.verify_otp(phone, code)
        if display_name:
            self._upsert_profile(session.identity.id, full_name=display_name, phone=phone)
        self._set_identity(session.identity)
        return session.identity

    # -------------------------------------------------------------------
    # Email / password
    # -------------------------------------------------------------------
    def register(self, email: str, password: str) -> Identity:
        validate_credentials(email, password)
        session = self.gateway.sign_up(email, password)
        self._upsert_profile(session.identity.id, email=email)
        self._set_identity(session.identity)
        return session.identity

    def login(self, email: str, password: str) -> Identity:
        account = self.demo.match_password(email, password)
        if account is not None:
            return self._sign_in_demo(account)

        session = self.gateway.sign_in_with_password(email, password)
        self._set_identity(session.identity)
        return session.identity

    def sign_out(self) -> None:
        self.store.clear()
        try:
            self.gateway.sign_out()
        except AuthError as exc:
            logger.warning("Auth service sign-out failed", error=str(exc))
        self._set_identity(None)

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _sign_in_demo(self, account: DemoAccount) -> Identity:
        identity = account.identity()
        self._upsert_profile(
            identity.id,
            full_name=account.full_name,
            phone=account.phone,
            email=account.email,
            is_admin=account.is_admin,
        )
        self.store.save(identity)
        self._set_identity(identity)
        logger.info("Demo account signed in", identity_id=identity.id)
        return identity

    def _upsert_profile(self, identity_id: str, **fields) -> None:
        try:
            current_domain.process(UpsertProfile(customer_id=identity_id, **fields), asynchronous=False)
        except Exception as exc:
            logger.warning("Profile upsert failed", identity_id=identity_id, error=str(exc))

    def _on_gateway_change(self, event: str, session: AuthSession | None) -> None:
        if session is not None:
            self._set_identity(session.identity)
        else:
            self._set_identity(self.store.load())

    def _fetch_admin_flag(self, identity: Identity | None) -> bool:
        if identity is None:
            return False
        try:
            return is_admin(identity.id)
        except Exception as exc:
            logger.warning("Admin flag lookup failed", identity_id=identity.id, error=str(exc))
            return False

    def _set_identity(self, identity: Identity | None) -> None:
        self.identity = identity
        self.is_admin = self._fetch_admin_flag(identity)
        for listener in list(self._listeners):
            listener(identity)
