"""Model configuration, conversation messages and provider adapters."""

from .adapters import (
    AIAdapter,
    GenerateTextRequest,
    GenerateTextResult,
    MockAdapter,
    MockResponse,
    OpenRouterAdapter,
    TokenUsage,
    create_adapter,
)
from .config import (
    LOCAL_AI_CONFIG,
    PRODUCTION_AI_CONFIG,
    DeploymentTier,
    Feature,
    FeatureConfig,
    ModelParameters,
    resolve_ai_config,
)
from .messages import AIMessage, Role, assistant, system, user

__all__ = [
    # Config
    "DeploymentTier", "Feature", "FeatureConfig", "ModelParameters", "resolve_ai_config",
    "LOCAL_AI_CONFIG", "PRODUCTION_AI_CONFIG",
    # Messages
    "AIMessage", "Role", "system", "user", "assistant",
    # Adapters
    "AIAdapter", "GenerateTextRequest", "GenerateTextResult", "TokenUsage",
    "MockAdapter", "MockResponse", "OpenRouterAdapter", "create_adapter",
]
