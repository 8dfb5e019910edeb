from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from paycycle import models
from paycycle.core.config import settings
from paycycle.core.logging import get_logger


logger = get_logger(__name__)


class UserSettingsService:
    """Read and update the per-user budgeting preferences (salary day, currency, locale)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_or_create_profile(self, user: models.User) -> models.UserProfile:
        profile = user.profile
        if profile is None:
            profile = models.UserProfile(
                user_id=user.id,
                base_currency=settings.DEFAULT_CURRENCY,
                locale=settings.DEFAULT_LOCALE,
            )
            self.db.add(profile)
            self.db.commit()
            self.db.refresh(user)
        return profile

    def salary_day(self, user: models.User) -> int:
        """Stored salary day, or the configured default (25) when unset."""
        profile = user.profile
        if profile is None or profile.salary_day is None:
            return settings.DEFAULT_SALARY_DAY
        return int(profile.salary_day)

    def locale(self, user: models.User) -> str:
        profile = user.profile
        return (profile.locale if profile and profile.locale else None) or settings.DEFAULT_LOCALE

    def currency(self, user: models.User) -> str:
        profile = user.profile
        return (profile.base_currency if profile and profile.base_currency else None) or settings.DEFAULT_CURRENCY

    def to_dict(self, user: models.User) -> dict[str, Any]:
        profile = user.profile
        return {
            "email": user.email,
            "name": profile.display_name if profile else None,
            "salary_day": self.salary_day(user),
            "currency": self.currency(user),
            "locale": self.locale(user),
            "timezone": settings.TIMEZONE,
        }

    def update(self, user: models.User, patch: dict[str, Any]) -> dict[str, Any]:
        profile = self.get_or_create_profile(user)
        column_map = {"name": "display_name", "currency": "base_currency", "salary_day": "salary_day", "locale": "locale"}
        for key, value in patch.items():
            column = column_map.get(key)
            if column is not None:
                setattr(profile, column, value)
        self.db.commit()
        self.db.refresh(profile)
        logger.info("settings updated for user %s: %s", user.id, sorted(patch))
        return self.to_dict(user)
