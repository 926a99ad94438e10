"""
Site settings and maintenance mode.

Settings are free-form key/value pairs. Three keys drive maintenance mode:
``maintenance_mode`` ("true" turns it on), ``maintenance_message`` and
``maintenance_exempt_paths`` (comma-separated path prefixes that stay
reachable). While it is on, public endpoints answer 503 to everyone except
signed-in users with admin access.
"""

from __future__ import annotations

from typing import Annotated, Iterable, List, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.entities.site_settings import SiteSetting
from abg_site.core.database.repositories.site_settings import SiteSettingRepository
from abg_site.core.database.repositories.users import UserRepository
from abg_site.core.logging_config import get_logger
from abg_site.core.models.domain.enums import AuditAction, SettingType
from abg_site.core.models.domain.permissions import has_any_admin_access
from abg_site.core.models.io.site_settings import MaintenanceStatus, SettingWrite
from abg_site.server.core import constant
from abg_site.server.errors import MaintenanceError

from .audit import AuditService
from .deps import SessionDep

logger = get_logger(__name__)

MAINTENANCE_MODE = "maintenance_mode"
MAINTENANCE_MESSAGE = "maintenance_message"
MAINTENANCE_EXEMPT_PATHS = "maintenance_exempt_paths"

DEFAULT_MAINTENANCE_MESSAGE = "We are currently performing scheduled maintenance. We'll be back online shortly."
DEFAULT_EXEMPT_PATHS = ["/admin", f"{constant.API_V1_STR}/admin", "/auth"]

DEFAULT_SETTINGS = [
    SettingWrite(
        key=MAINTENANCE_MODE,
        value="false",
        type=SettingType.BOOLEAN,
        description="Enable maintenance mode to show the maintenance page to non-admin users",
    ),
    SettingWrite(
        key=MAINTENANCE_MESSAGE,
        value="",
        type=SettingType.TEXT,
        description="Custom maintenance message (optional)",
    ),
    SettingWrite(
        key=MAINTENANCE_EXEMPT_PATHS,
        value=",".join(DEFAULT_EXEMPT_PATHS),
        type=SettingType.TEXT,
        description="Comma-separated paths that remain accessible during maintenance",
    ),
]


class SiteSettingsService:
    def __init__(self, session: AsyncSession, audit: Optional[AuditService] = None):
        self.settings = SiteSettingRepository(session)
        self.audit = audit or AuditService(session)

    async def seed_defaults(self) -> List[SiteSetting]:
        """Insert the maintenance settings that do not exist yet; existing values are left alone."""
        created = []
        for default in DEFAULT_SETTINGS:
            if await self.settings.get_by_key(default.key) is None:
                created.append(
                    await self.settings.create(
                        SiteSetting(
                            key=default.key,
                            value=default.value,
                            type=default.type.value,
                            description=default.description,
                        )
                    )
                )
        if created:
            logger.info(f"Seeded site settings: {', '.join(s.key for s in created)}")
        return created

    async def list_all(self) -> List[SiteSetting]:
        await self.seed_defaults()
        return await self.settings.list()

    async def list_public(self, keys: Optional[Iterable[str]] = None) -> List[SiteSetting]:
        keys = list(keys or [])
        if keys:
            return await self.settings.list_by_keys(keys)
        return await self.settings.list()

    async def put(self, data: SettingWrite) -> SiteSetting:
        """Create or overwrite one setting."""
        setting = await self.settings.get_by_key(data.key)
        if setting is None:
            setting = await self.settings.create(
                SiteSetting(key=data.key, value=data.value, type=data.type.value, description=data.description)
            )
        else:
            setting.value = data.value
            if data.description is not None:
                setting.description = data.description
            setting = await self.settings.update(setting)
        await self.audit.log(AuditAction.setting_updated, target_type="setting", target_id=data.key, meta={"value": data.value})
        logger.info(f"Site setting {data.key} set to {data.value!r}")
        return setting

    async def maintenance_status(self) -> MaintenanceStatus:
        mode = await self.settings.get_by_key(MAINTENANCE_MODE)
        message = await self.settings.get_by_key(MAINTENANCE_MESSAGE)
        exempt = await self.settings.get_by_key(MAINTENANCE_EXEMPT_PATHS)
        return MaintenanceStatus(
            enabled=bool(mode and mode.value.strip().lower() == "true"),
            message=(message.value if message and message.value else DEFAULT_MAINTENANCE_MESSAGE),
            exempt_paths=(
                [p.strip() for p in exempt.value.split(",") if p.strip()] if exempt else list(DEFAULT_EXEMPT_PATHS)
            ),
        )


async def ensure_site_available(
    request: Request,
    session: SessionDep,
    x_user_email: Annotated[Optional[str], Header(alias=constant.USER_EMAIL_HEADER)] = None,
) -> None:
    """
    Router dependency that refuses public requests during maintenance.

    Raises:
        MaintenanceError: maintenance mode is on, the path is not exempt and
            the caller has no admin access.
    """
    try:
        status = await SiteSettingsService(session).maintenance_status()
    except SQLAlchemyError as e:
        # Settings unavailable: keep the site up
        logger.warning(f"Could not read maintenance status: {e}")
        return
    if not status.enabled:
        return
    if any(request.url.path.startswith(prefix) for prefix in status.exempt_paths):
        return
    if x_user_email:
        user = await UserRepository(session).get_by_email(x_user_email.strip())
        if user and has_any_admin_access(user.roles):
            return
    raise MaintenanceError(status.message)


MaintenanceGuard = Depends(ensure_site_available)
