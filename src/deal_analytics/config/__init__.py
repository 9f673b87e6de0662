"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from functools import lru_cache
from pathlib import Path
from typing import List


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="deal-sla-analytics", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root logging level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)

    # ========== SLA Configuration ==========
    sla_config_path: Path = Field(
        default=Path("sla_config.yaml"),
        description="Path to SLA phase/threshold YAML file"
    )

    # ========== CRM Custom Fields ==========
    department_field: str = Field(
        default="UF_CRM_1758023694929",
        description="Deal field holding the department option ID"
    )
    rejection_reason_fields: List[str] = Field(
        default=["UF_CRM_1753862633986", "UF_CRM_1753861857976"],
        description="Deal fields holding the rejection reason, first non-empty wins"
    )
    comment_field: str = Field(
        default="UF_CRM_1768995573895",
        description="Deal field holding the comment classification option ID"
    )
    country_field: str = Field(
        default="UF_CRM_1769688668259",
        description="Deal field holding the country option ID"
    )

    # ========== Analytics ==========
    percentage_precision: int = Field(
        default=2,
        description="Decimal places for group row percentages",
        ge=0,
        le=6
    )
    rejection_rate_precision: int = Field(
        default=0,
        description="Decimal places for the top-line rejection rate",
        ge=0,
        le=6
    )
    avg_delay_placeholder_hours: float = Field(
        default=1.0,
        description="Average delay reported until a real data source exists",
        ge=0
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class MetricKey(str):
    """Keys of the three SLA metrics, fixed in every summary."""
    FIRST_COMMUNICATION = "first_communication"
    FOLLOW_UP = "follow_up"
    PRICE_SHARING = "price_sharing"


class PhaseKey(str):
    """Conceptual lifecycle phases resolved from stage display names."""
    INITIAL = "initial"
    FOLLOW_UP = "follow_up"
    PRICE_SHARING = "price_sharing"


class InitialResponsePolicy(str):
    """How deals that never left the initial phase are counted."""
    EXCLUDE = "exclude"
    ELAPSED_SINCE_CREATION = "elapsed_since_creation"


class GroupDimension(str):
    """Attribute dimensions for grouped analytics."""
    STAGE = "stage"
    DEPARTMENT = "department"
    REJECTION_REASON = "rejection_reason"
    COMMENT = "comment"
    SOURCE = "source"
    COUNTRY = "country"


# ========== Display Defaults ==========

METRIC_TITLES = {
    MetricKey.FIRST_COMMUNICATION: "First Communication on Time",
    MetricKey.FOLLOW_UP: "Follow-up on Time",
    MetricKey.PRICE_SHARING: "Price sharing to Patient on Time",
}

DEFAULT_PHASE_FRAGMENTS = {
    PhaseKey.INITIAL: "new",
    PhaseKey.FOLLOW_UP: "Follow up in 24 Hours",
    PhaseKey.PRICE_SHARING: "Offer Finalization for Patient",
}

DEFAULT_THRESHOLD_HOURS = {
    MetricKey.FIRST_COMMUNICATION: 1.0,
    MetricKey.FOLLOW_UP: 24.0,
    MetricKey.PRICE_SHARING: 24.0,
}

BLANK_LABELS = {
    GroupDimension.STAGE: "Unknown",
    GroupDimension.DEPARTMENT: "Unassigned",
    GroupDimension.REJECTION_REASON: "(Blank)",
    GroupDimension.COMMENT: "(Blank)",
    GroupDimension.SOURCE: "Unassigned",
    GroupDimension.COUNTRY: "(Blank)",
}


# ========== Lists for validation ==========

VALID_METRIC_KEYS = [
    MetricKey.FIRST_COMMUNICATION, MetricKey.FOLLOW_UP, MetricKey.PRICE_SHARING
]
VALID_PHASE_KEYS = [PhaseKey.INITIAL, PhaseKey.FOLLOW_UP, PhaseKey.PRICE_SHARING]
VALID_INITIAL_RESPONSE_POLICIES = [
    InitialResponsePolicy.EXCLUDE, InitialResponsePolicy.ELAPSED_SINCE_CREATION
]
