"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from app.config.settings import DEFAULT_SECRET_KEY, Settings
from app.models.enums import LifecyclePolicy, ReferralRewardMode


class TestSettings:
    """Tests for Settings validation."""

    def test_defaults(self) -> None:
        config = Settings(_env_file=None, environment="development")
        assert config.lifecycle_policy == LifecyclePolicy.AUTO_INVEST
        assert config.referral_reward_mode == ReferralRewardMode.QUALIFICATION
        assert config.is_production is False

    def test_policies_from_strings(self) -> None:
        config = Settings(
            _env_file=None,
            lifecycle_policy="manual_invest",
            referral_reward_mode="profit_share",
        )
        assert config.lifecycle_policy == LifecyclePolicy.MANUAL_INVEST
        assert config.referral_reward_mode == ReferralRewardMode.PROFIT_SHARE

    def test_rejects_unknown_database_driver(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, database_url="mysql://localhost/db")

    def test_production_requires_secret_key(self) -> None:
        with pytest.raises(ValidationError, match="SECRET_KEY"):
            Settings(
                _env_file=None,
                environment="production",
                secret_key=DEFAULT_SECRET_KEY,
                admin_password_hash="$2b$12$hash",
            )

    def test_production_requires_admin_hash(self) -> None:
        with pytest.raises(ValidationError, match="ADMIN_PASSWORD_HASH"):
            Settings(
                _env_file=None,
                environment="production",
                debug=False,
                secret_key="x" * 40,
                admin_password_hash="",
            )

    def test_production_rejects_debug(self) -> None:
        with pytest.raises(ValidationError, match="DEBUG"):
            Settings(
                _env_file=None,
                environment="production",
                debug=True,
                secret_key="x" * 40,
                admin_password_hash="$2b$12$hash",
            )

    def test_wallet_address_stripped(self) -> None:
        config = Settings(_env_file=None, platform_wallet_address="  TAddr123  ")
        assert config.platform_wallet_address == "TAddr123"
