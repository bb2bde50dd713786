"""Permanent demo accounts that sign in without the auth service."""

from dataclasses import dataclass

from storefront.session.identity import Identity

DEMO_CODE = "123456"
DEMO_MESSAGE_ID = "demo-message-id"


@dataclass(frozen=True)
class DemoAccount:
    id: str
    full_name: str
    phone: str
    email: str
    password: str
    is_admin: bool = False

    def identity(self) -> Identity:
        return Identity(id=self.id, phone=self.phone, email=self.email, is_demo=True)


DEFAULT_DEMO_ACCOUNTS = (
    DemoAccount(
        id="demo-customer-id",
        full_name="Demo Customer",
        phone="+919876543210",
        email="customer@demo.com",
        password="demo1234",
    ),
    DemoAccount(
        id="demo-admin-id",
        full_name="Demo Admin",
        phone="+919876543211",
        email="admin@demo.com",
        password="admin1234",
        is_admin=True,
    ),
)


class DemoAccounts:
    def __init__(self, accounts=DEFAULT_DEMO_ACCOUNTS, code: str = DEMO_CODE) -> None:
        self.accounts = tuple(accounts)
        self.code = code

    def by_phone(self, phone: str) -> DemoAccount | None:
        return next((a for a in self.accounts if a.phone == phone), None)

    def by_id(self, identity_id: str) -> DemoAccount | None:
        return next((a for a in self.accounts if a.id == identity_id), None)

    def match_code(self, phone: str, code: str) -> DemoAccount | None:
        account = self.by_phone(phone)
        return account if account is not None and code == self.code else None

    def match_password(self, email: str, password: str) -> DemoAccount | None:
        email = (email or "").strip().lower()
        return next((a for a in self.accounts if a.email == email and a.password == password), None)
