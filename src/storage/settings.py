"""Category-scoped key/value application settings."""

import copy
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.logging import get_logger
from src.models.base import utcnow
from src.models.log import Setting

logger = get_logger(__name__)

DEFAULT_SETTINGS: dict[str, dict[str, Any]] = {
    "general": {
        "companyName": "Your Company",
        "emailAddress": "contact@example.com",
        "notificationPreferences": {"email": True, "inApp": True},
        "defaultTaskReminder": "1day",
    },
    "audit": {
        "retentionPeriod": "90days",
        "logTaskCompletions": True,
        "logClientInteractions": True,
        "logDataExports": True,
        "enableDetailedLogs": True,
    },
}


class SettingsStorage:
    """Reads settings grouped by category and upserts them per key."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_settings(self) -> dict[str, dict[str, Any]]:
        """All settings as ``{category: {key: value}}``.

        Categories with no stored rows fall back to their defaults.
        """
        result = await self.session.execute(select(Setting).order_by(Setting.id))
        grouped: dict[str, dict[str, Any]] = {}
        for setting in result.scalars().all():
            grouped.setdefault(setting.category, {})[setting.key] = setting.value

        for category, defaults in DEFAULT_SETTINGS.items():
            if category not in grouped:
                grouped[category] = copy.deepcopy(defaults)
        return grouped

    async def update_settings(
        self,
        category: str,
        values: dict[str, Any],
        user_id: int,
    ) -> list[Setting]:
        """Insert or overwrite each key in ``category``."""
        existing_result = await self.session.execute(
            select(Setting).where(
                Setting.category == category,
                Setting.key.in_(list(values)),
            )
        )
        existing = {setting.key: setting for setting in existing_result.scalars().all()}

        saved = []
        for key, value in values.items():
            setting = existing.get(key)
            if setting is None:
                setting = Setting(
                    category=category,
                    key=key,
                    value=value,
                    updated_by_id=user_id,
                )
                self.session.add(setting)
            else:
                setting.value = value
                setting.updated_at = utcnow()
                setting.updated_by_id = user_id
            saved.append(setting)

        await self.session.flush()
        logger.info("settings_updated", category=category, keys=sorted(values))
        return saved
