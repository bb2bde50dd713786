import pytest
from protean.exceptions import ValidationError
from storefront.session.validation import normalize_phone, validate_code, validate_credentials


class TestNormalizePhone:
    @pytest.mark.parametrize(
        "raw",
        ["9876543210", "+919876543210", "98765 43210", "+91 98765-43210"],
    )
    def test_accepts_indian_mobile_numbers(self, raw):
        assert normalize_phone(raw) == "+919876543210"

    @pytest.mark.parametrize("raw", ["", "12345", "5876543210", "98765432101", "+449876543210", None])
    def test_rejects_everything_else(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            normalize_phone(raw)
        assert "phone" in exc_info.value.messages


class TestValidateCode:
    def test_six_digits(self):
        assert validate_code(" 123456 ") == "123456"

    @pytest.mark.parametrize("code", ["", "12345", "1234567", "12a456"])
    def test_rejects_malformed_codes(self, code):
        with pytest.raises(ValidationError) as exc_info:
            validate_code(code)
        assert "code" in exc_info.value.messages


class TestValidateCredentials:
    def test_lowercases_email(self):
        assert validate_credentials(" Asha@Example.COM ", "secret1") == "asha@example.com"

    def test_rejects_bad_email(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_credentials("not-an-email", "secret1")
        assert "email" in exc_info.value.messages

    def test_rejects_short_password(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_credentials("asha@example.com", "12345")
        assert "password" in exc_info.value.messages
