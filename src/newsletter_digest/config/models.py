"""Pydantic configuration models for the newsletter digest."""

from pydantic import BaseModel, Field, field_validator

from newsletter_digest.data import ContentFilter, ResultType

# ============================================================
# Search Config
# ============================================================


class SearchConfig(BaseModel):
    """What to search for and how."""

    terms: list[str] = Field(
        default_factory=lambda: ["SharePoint", "Office365", "SPFX", "Office 365"],
        min_length=1,
    )
    lang: str = "en"
    result_type: ResultType = ResultType.RECENT
    count: int = Field(default=100, ge=1, le=100)
    # Days back from today. until_days=0 means "up to now" (unbounded).
    since_days: int = Field(default=6, ge=0)
    until_days: int = Field(default=0, ge=0)
    filter: ContentFilter | None = ContentFilter.LINKS

    model_config = {"frozen": True}

    @field_validator("terms")
    @classmethod
    def terms_not_blank(cls, v: list[str]) -> list[str]:
        if any(not term.strip() for term in v):
            raise ValueError("Search terms must not be blank")
        return v


# ============================================================
# Curation Config
# ============================================================


class CurationConfig(BaseModel):
    """Thresholds for the curation stages."""

    min_retweet_count: int = Field(default=3, ge=0)

    model_config = {"frozen": True}


# ============================================================
# Storage Config
# ============================================================


class StorageConfig(BaseModel):
    """Where day files and reviewer pages live, and whether to read them back."""

    data_path: str = "_tweets"
    use_cache: bool = False

    model_config = {"frozen": True}


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Configuration for intermediate run logging."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class DigestConfig(BaseModel):
    """Root configuration for the newsletter digest."""

    search: SearchConfig = Field(default_factory=SearchConfig)
    curation: CurationConfig = Field(default_factory=CurationConfig)
    reviewers: list[str] = Field(
        default_factory=lambda: ["Dmitry", "Alex", "Olya", "Natally", "Andrew"],
        min_length=1,
    )
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}

    @field_validator("reviewers")
    @classmethod
    def reviewers_valid(cls, v: list[str]) -> list[str]:
        if len(set(v)) != len(v):
            raise ValueError("Reviewer names must be unique")
        for name in v:
            # Names become file names in the data directory
            if not name.strip() or name in (".", "..") or "/" in name or "\\" in name:
                raise ValueError(f"Invalid reviewer name: {name!r}")
        return v
