"""Per-tier model parameters for each AI feature.

The tables are built once at import and shared; resolution is a lookup.

Example:
    >>> from airesponse.ai import DeploymentTier, Feature, resolve_ai_config
    >>> config = resolve_ai_config(DeploymentTier.LOCAL)
    >>> config.chat.temperature
    0.7
    >>> config.for_feature(Feature.EVALUATION).max_tokens
    100
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, assert_never

from pydantic import BaseModel, ConfigDict, Field, PositiveInt


class DeploymentTier(StrEnum):
    """Environment class used to select model parameters."""
    LOCAL = "local"
    STAGING = "staging"
    PRODUCTION = "production"


class Feature(StrEnum):
    """Named AI use cases, each with its own parameter set."""
    CHAT = "chat"
    EVALUATION = "evaluation"
    NOTE_SUMMARY = "note_summary"


class ModelParameters(BaseModel):
    """Parameters for one outbound provider call."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    model: Annotated[str, Field(min_length=1, description="Provider model identifier")]
    temperature: Annotated[float, Field(ge=0.0, le=2.0, description="Sampling temperature")]
    max_tokens: PositiveInt = Field(alias="maxTokens", description="Output token ceiling")


class FeatureConfig(BaseModel):
    """One ModelParameters per feature. All keys are required; no others are allowed."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    chat: ModelParameters
    evaluation: ModelParameters
    note_summary: ModelParameters = Field(alias="noteSummary")

    def for_feature(self, feature: Feature | str) -> ModelParameters:
        match Feature(feature):
            case Feature.CHAT:
                return self.chat
            case Feature.EVALUATION:
                return self.evaluation
            case Feature.NOTE_SUMMARY:
                return self.note_summary
            case unreachable:
                assert_never(unreachable)

    def to_wire(self) -> dict[str, dict[str, object]]:
        """camelCase mapping for the request-construction layer."""
        return self.model_dump(by_alias=True)


# ─────────────────────────────────────────────────────────────────────────────
# Static Tables
# ─────────────────────────────────────────────────────────────────────────────

LOCAL_AI_CONFIG = FeatureConfig(
    chat=ModelParameters(model="google/gemini-2.5-flash", temperature=0.7, max_tokens=2000),
    evaluation=ModelParameters(model="qwen/qwen3-8b", temperature=0.0, max_tokens=100),
    note_summary=ModelParameters(model="google/gemini-2.5-flash", temperature=0.3, max_tokens=1000),
)

# shared by staging and production
PRODUCTION_AI_CONFIG = FeatureConfig(
    chat=ModelParameters(model="google/gemini-2.5-flash", temperature=0.7, max_tokens=2000),
    evaluation=ModelParameters(model="qwen/qwen3-8b", temperature=0.0, max_tokens=100),
    note_summary=ModelParameters(model="google/gemini-2.5-flash", temperature=0.3, max_tokens=1000),
)


def resolve_ai_config(tier: DeploymentTier | str) -> FeatureConfig:
    """Resolve the feature config for a deployment tier.

    Raises:
        ValueError: If a plain string is not a known tier name
    """
    match DeploymentTier(tier):
        case DeploymentTier.LOCAL:
            return LOCAL_AI_CONFIG
        case DeploymentTier.STAGING | DeploymentTier.PRODUCTION:
            return PRODUCTION_AI_CONFIG
        case unreachable:
            assert_never(unreachable)
