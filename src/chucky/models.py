"""Pydantic models for Chucky configuration and remote API payloads."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DEFAULT_BUNDLE_WAIT_ATTEMPTS = 15
DEFAULT_BUNDLE_WAIT_DELAY_SECONDS = 2.0


class BundleWaitPolicy(BaseModel):
    """Retry policy while a remote bundle is still being finalized.

    Attributes:
        attempts: Total bundle lookups before giving up.
        delay_seconds: Pause between lookups.

    Example:
        >>> BundleWaitPolicy().attempts
        15
    """

    model_config = ConfigDict(extra="allow")

    attempts: int = Field(default=DEFAULT_BUNDLE_WAIT_ATTEMPTS, ge=1)
    delay_seconds: float = Field(default=DEFAULT_BUNDLE_WAIT_DELAY_SECONDS, ge=0)


class GlobalConfig(BaseModel):
    """User-wide credentials and portal settings.

    Accepts both ``api_key`` and the legacy ``apiKey`` spelling.

    Example:
        >>> GlobalConfig.model_validate({"apiKey": "ak_live_x"}).api_key
        'ak_live_x'
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    api_key: str | None = Field(
        default=None, validation_alias=AliasChoices("api_key", "apiKey")
    )
    email: str | None = None
    portal_url: str | None = Field(
        default=None, validation_alias=AliasChoices("portal_url", "portalUrl")
    )
    bundle_wait: BundleWaitPolicy = Field(default_factory=BundleWaitPolicy)

    @field_validator("api_key", "portal_url", mode="before")
    @classmethod
    def normalize_optional_text(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or None
        return value


class ProjectConfig(BaseModel):
    """Per-directory project binding stored in ``.chucky.json``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    project_id: str = Field(validation_alias=AliasChoices("project_id", "projectId"))
    project_name: str = Field(
        default="", validation_alias=AliasChoices("project_name", "projectName")
    )
    folder: str = "."
    hmac_key: str | None = Field(
        default=None, validation_alias=AliasChoices("hmac_key", "hmacKey")
    )

    @field_validator("folder", mode="before")
    @classmethod
    def normalize_folder(cls, value: object) -> object:
        if value is None:
            return "."
        if isinstance(value, str):
            return value.strip() or "."
        return value


class BundleLocation(BaseModel):
    """Where to download a changeset's bundle.

    Job and session endpoints spell the fields differently; both are accepted.

    Example:
        >>> BundleLocation.model_validate(
        ...     {"download_url": "https://x/b", "has_changes": False}
        ... ).has_changes
        False
    """

    model_config = ConfigDict(extra="ignore")

    download_url: str = Field(
        validation_alias=AliasChoices("download_url", "downloadUrl")
    )
    has_changes: bool = Field(validation_alias=AliasChoices("has_changes", "hasChanges"))


class JobError(BaseModel):
    model_config = ConfigDict(extra="allow")

    message: str = "Job failed"
    name: str | None = None


class Job(BaseModel):
    """Remote job status as reported by ``/api/jobs/get``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    status: str = ""
    is_completed: bool = Field(
        default=False, validation_alias=AliasChoices("is_completed", "isCompleted")
    )
    is_success: bool = Field(
        default=False, validation_alias=AliasChoices("is_success", "isSuccess")
    )
    is_failed: bool = Field(
        default=False, validation_alias=AliasChoices("is_failed", "isFailed")
    )
    error: JobError | None = None


class Session(BaseModel):
    """One agent session as listed by ``/api/sessions/list``."""

    model_config = ConfigDict(extra="allow")

    id: str
    status: str = ""
    user_id: str | None = None
    job_id: str | None = None
    duration_ms: float | None = None
    total_cost_usd: float | None = None
    has_bundle: bool = False
    bundle_has_changes: bool = False


class Pagination(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    limit: int | None = None
    offset: int = 0
    has_more: bool = Field(default=False, validation_alias=AliasChoices("has_more", "hasMore"))


class SessionList(BaseModel):
    model_config = ConfigDict(extra="allow")

    sessions: list[Session] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)
