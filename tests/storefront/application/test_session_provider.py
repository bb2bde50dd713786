"""Tests for the session provider: demo bypass, gateway sign-in, listeners."""

from unittest.mock import patch

import pytest
from protean.exceptions import ValidationError
from storefront.account.queries import find_customer
from storefront.session.demo import DEMO_CODE, DEMO_MESSAGE_ID
from storefront.session.gateway import AuthError
from storefront.session.identity import Identity
from storefront.session.provider import SessionProvider
from storefront.session.store import FileIdentityStore, MemoryIdentityStore


@pytest.fixture
def store():
    return MemoryIdentityStore()


@pytest.fixture
def provider(fake_gateway, store):
    session = SessionProvider(gateway=fake_gateway, store=store)
    session.start()
    yield session
    session.close()


class TestStart:
    def test_anonymous(self, provider):
        assert provider.identity is None
        assert provider.loading is False

    def test_restores_demo_identity(self, fake_gateway, store):
        store.save(Identity(id="demo-customer-id", is_demo=True))

        session = SessionProvider(gateway=fake_gateway, store=store)
        assert session.start().id == "demo-customer-id"

    def test_auth_service_session_wins(self, fake_gateway, store):
        fake_gateway.sign_up("asha@example.com", "secret1")
        store.save(Identity(id="demo-customer-id", is_demo=True))

        identity = SessionProvider(gateway=fake_gateway, store=store).start()
        assert identity.email == "asha@example.com"

    def test_auth_service_down_falls_back_to_store(self, fake_gateway, store):
        store.save(Identity(id="demo-customer-id", is_demo=True))
        fake_gateway.configure(should_succeed=False)

        assert SessionProvider(gateway=fake_gateway, store=store).start().id == "demo-customer-id"


class TestDemoPhone:
    def test_request_code_skips_auth_service(self, provider, fake_gateway):
        assert provider.request_code("9876543210") == DEMO_MESSAGE_ID
        assert fake_gateway.calls == [{"method": "get_session"}]

    def test_verify_signs_in_locally(self, provider, fake_gateway, store):
        identity = provider.verify_code("+91 98765 43210", DEMO_CODE)

        assert identity.id == "demo-customer-id"
        assert identity.is_demo is True
        assert provider.identity == identity
        assert store.load().id == "demo-customer-id"
        assert not any(call["method"] == "verify_otp" for call in fake_gateway.calls)

    def test_demo_profile_is_upserted(self, provider):
        provider.verify_code("9876543211", DEMO_CODE)

        customer = find_customer("demo-admin-id")
        assert customer.full_name == "Demo Admin"
        assert provider.is_admin is True

    def test_wrong_code_goes_to_auth_service(self, provider):
        with pytest.raises(AuthError):
            provider.verify_code("9876543210", "000000")
        assert provider.identity is None


class TestPhoneOtp:
    def test_code_round_trip(self, provider, fake_gateway):
        provider.request_code("9812345678")
        code = fake_gateway.sent_codes["+919812345678"]

        identity = provider.verify_code("9812345678", code, display_name="Asha Rao")

        assert identity.phone == "+919812345678"
        assert provider.identity == identity
        assert find_customer(identity.id).full_name == "Asha Rao"

    def test_invalid_phone(self, provider, fake_gateway):
        with pytest.raises(ValidationError):
            provider.request_code("12345")
        assert len(fake_gateway.calls) == 1

    def test_invalid_code_format(self, provider):
        with pytest.raises(ValidationError):
            provider.verify_code("9812345678", "12")


class TestEmailPassword:
    def test_register_then_login(self, provider):
        registered = provider.register("asha@example.com", "secret1")
        assert registered.email == "asha@example.com"
        assert find_customer(registered.id).email == "asha@example.com"

        provider.sign_out()
        assert provider.identity is None

        assert provider.login("asha@example.com", "secret1").id == registered.id

    def test_credentials_reach_auth_service_as_entered(self, provider, fake_gateway):
        provider.register("Asha@Example.com", "secret1")
        provider.sign_out()

        with pytest.raises(AuthError):
            provider.login(" Asha@Example.com", "secret1")

        sent = [call["email"] for call in fake_gateway.calls if "email" in call]
        assert sent == ["Asha@Example.com", " Asha@Example.com"]

    def test_register_rejects_short_password(self, provider, fake_gateway):
        with pytest.raises(ValidationError):
            provider.register("asha@example.com", "123")
        assert not any(call["method"] == "sign_up" for call in fake_gateway.calls)

    def test_bad_password(self, provider):
        provider.register("asha@example.com", "secret1")
        provider.sign_out()

        with pytest.raises(AuthError):
            provider.login("asha@example.com", "wrong-one")

    def test_demo_login(self, provider, store):
        identity = provider.login("admin@demo.com", "admin1234")
        assert identity.id == "demo-admin-id"
        assert provider.is_admin is True
        assert store.load().id == "demo-admin-id"


class TestSignOut:
    def test_clears_demo_slot(self, provider, store):
        provider.login("customer@demo.com", "demo1234")
        provider.sign_out()

        assert provider.identity is None
        assert provider.is_admin is False
        assert store.load() is None

    def test_auth_service_failure_still_signs_out(self, provider, fake_gateway):
        provider.login("customer@demo.com", "demo1234")
        fake_gateway.configure(should_succeed=False)

        provider.sign_out()
        assert provider.identity is None

    def test_demo_identity_survives_restart(self, fake_gateway, tmp_path):
        path = tmp_path / "session.json"
        SessionProvider(gateway=fake_gateway, store=FileIdentityStore(path)).login("customer@demo.com", "demo1234")

        restarted = SessionProvider(gateway=fake_gateway, store=FileIdentityStore(path))
        assert restarted.start().id == "demo-customer-id"


class TestListeners:
    def test_notified_in_order(self, provider):
        seen = []
        provider.subscribe(lambda identity: seen.append(identity.id if identity else None))

        provider.login("customer@demo.com", "demo1234")
        provider.sign_out()

        assert seen[0] == "demo-customer-id"
        assert seen[-1] is None

    def test_unsubscribe(self, provider):
        seen = []
        unsubscribe = provider.subscribe(seen.append)
        unsubscribe()

        provider.login("customer@demo.com", "demo1234")
        assert seen == []

    def test_follows_auth_service_events(self, provider, fake_gateway):
        session = fake_gateway.sign_up("asha@example.com", "secret1")
        assert provider.identity == session.identity


class TestAdminFlag:
    def test_lookup_failure_means_not_admin(self, provider, monkeypatch):
        def broken(_):
            raise RuntimeError("profiles unavailable")

        monkeypatch.setattr("storefront.session.provider.is_admin", broken)
        provider.login("admin@demo.com", "admin1234")
        assert provider.is_admin is False

    @patch("storefront.session.provider.current_domain")
    def test_profile_failure_does_not_block_sign_in(self, mock_domain, provider):
        mock_domain.process.side_effect = RuntimeError("profiles unavailable")

        identity = provider.login("customer@demo.com", "demo1234")

        assert identity.id == "demo-customer-id"
        assert mock_domain.process.called
