from __future__ import annotations

"""
Creator settings (policy singleton)
===================================
`creator_settings` holds at most one row (`id = 1`). Services read it once
per operation through `get_creator_policy()` and pass the resulting frozen
`CreatorPolicy` down; when the row is absent the `CREATOR_*` defaults from
`Settings` apply.
"""

import logging
from typing import Any, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.db.models.creator_settings import SETTINGS_ROW_ID, CreatorSettings
from app.schemas.creator import CreatorPolicy, CreatorSettingsUpdateIn
from app.schemas.submission import parse_model
from app.services.creator.boundary import operation

logger = logging.getLogger(__name__)


async def get_creator_policy(db: AsyncSession) -> CreatorPolicy:
    """Resolve the policy for one operation (row, or configured defaults)."""
    row = await db.get(CreatorSettings, SETTINGS_ROW_ID)
    if row is None:
        return CreatorPolicy.defaults()
    return CreatorPolicy.model_validate(row)


@operation("get_creator_settings")
async def get_creator_settings(db: AsyncSession) -> CreatorPolicy:
    return await get_creator_policy(db)


@operation("update_creator_settings")
async def update_creator_settings(
    db: AsyncSession, patch: Union[CreatorSettingsUpdateIn, dict[str, Any]]
) -> CreatorPolicy:
    """Partial upsert of the singleton row."""
    data = parse_model(CreatorSettingsUpdateIn, patch)
    changes = data.model_dump(exclude_none=True)

    stmt = select(CreatorSettings).where(CreatorSettings.id == SETTINGS_ROW_ID).with_for_update()
    row = (await db.execute(stmt)).scalars().first()
    if row is None:
        row = CreatorSettings(id=SETTINGS_ROW_ID, **CreatorPolicy.defaults().model_dump())
        db.add(row)

    for field, value in changes.items():
        setattr(row, field, value)

    if row.min_account_age_days > row.max_account_age_days:
        raise ValidationError(
            "min_account_age_days must not exceed max_account_age_days",
            details={
                "min_account_age_days": row.min_account_age_days,
                "max_account_age_days": row.max_account_age_days,
            },
        )

    await db.commit()
    logger.info("Creator settings updated: %s", sorted(changes))
    return CreatorPolicy.model_validate(row)


__all__ = ["get_creator_policy", "get_creator_settings", "update_creator_settings"]
