"""Pydantic models for the SharePoint REST shapes the service reads (subset we need)."""

from enum import IntEnum

from pydantic import BaseModel, Field


class SiteContext(BaseModel):
    """Optional per-request site selection; blanks fall back to WebhookSettings."""

    tenant_prefix: str | None = None
    site_relative_path: str | None = None


class ChangeType(IntEnum):
    """SharePoint ``SP.ChangeType`` values."""

    NO_CHANGE = 0
    ADD = 1
    UPDATE = 2
    DELETE_OBJECT = 3
    RENAME = 4
    MOVE_AWAY = 5
    MOVE_INTO = 6
    RESTORE = 7
    ROLE_ADD = 8
    ROLE_DELETE = 9
    ROLE_UPDATE = 10
    ASSIGNMENT_ADD = 11
    ASSIGNMENT_DELETE = 12
    MEMBER_ADD = 13
    MEMBER_DELETE = 14
    SYSTEM_UPDATE = 15
    NAVIGATION = 16
    SCOPE_ADD = 17
    SCOPE_DELETE = 18
    LIST_CONTENT_TYPE_ADD = 19
    LIST_CONTENT_TYPE_DELETE = 20
    DIRTY = 21
    ACTIVITY = 22


class ChangeSummary(BaseModel):
    """Per-category counts for one change query."""

    total_count: int = Field(0, alias="totalCount")
    add_count: int = Field(0, alias="addCount")
    update_count: int = Field(0, alias="updateCount")
    delete_count: int = Field(0, alias="deleteCount")

    model_config = {"populate_by_name": True}


class ListEnsureResult(BaseModel):
    """Outcome of an idempotent create-if-absent on a list."""

    title: str
    existed: bool


class WebInfo(BaseModel):
    """Subset of ``_api/web`` used by the connectivity check."""

    title: str = Field("", alias="Title")
    url: str = Field("", alias="Url")

    model_config = {"populate_by_name": True, "extra": "ignore"}
