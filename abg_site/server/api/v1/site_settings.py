"""
Site Settings Endpoints.

Public reads of settings and the maintenance status; the settings page edits
them through ``admin_router``.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query

from abg_site.core.database.entities.users import User
from abg_site.core.models.io.site_settings import MaintenanceStatus, SettingRead, SettingWrite
from abg_site.server.services.audit import AuditService
from abg_site.server.services.deps import ClientInfoDep, SessionDep, require_page_access
from abg_site.server.services.site_settings import SiteSettingsService

router = APIRouter()
admin_router = APIRouter()

SettingsManagerDep = Annotated[User, Depends(require_page_access("settings"))]


@router.get(
    "",
    response_model=List[SettingRead],
    summary="Read Settings",
    description="Site settings, optionally only the given keys.",
    response_description="A list of settings.",
)
async def read_settings(session: SessionDep, key: Annotated[Optional[List[str]], Query()] = None) -> List[SettingRead]:
    """
    Read settings.

    - **key**: Repeat to select several keys, e.g. `?key=a&key=b`.
    """
    return [SettingRead.model_validate(s) for s in await SiteSettingsService(session).list_public(key)]


@router.get(
    "/maintenance",
    response_model=MaintenanceStatus,
    summary="Maintenance Status",
    description="Whether maintenance mode is on, its message and exempt paths.",
    response_description="The maintenance status.",
)
async def maintenance_status(session: SessionDep) -> MaintenanceStatus:
    return await SiteSettingsService(session).maintenance_status()


@admin_router.get(
    "",
    response_model=List[SettingRead],
    summary="List Settings",
    description="Every setting by key. Missing maintenance settings are created with their defaults first.",
    response_description="A list of settings.",
)
async def list_settings(session: SessionDep, _: SettingsManagerDep) -> List[SettingRead]:
    return [SettingRead.model_validate(s) for s in await SiteSettingsService(session).list_all()]


@admin_router.put(
    "",
    response_model=SettingRead,
    summary="Write Setting",
    description="Create a setting or replace its value.",
    response_description="The stored setting.",
)
async def write_setting(
    body: SettingWrite, session: SessionDep, user: SettingsManagerDep, client: ClientInfoDep
) -> SettingRead:
    """
    Write a setting.

    - **key** / **value**: Values are stored as text; `maintenance_mode` takes "true" or "false".
    - **type**: Only used when the key is new.
    """
    service = SiteSettingsService(session, AuditService(session, actor=user, client=client))
    return SettingRead.model_validate(await service.put(body))
