"""Azure OpenAI handler authenticated with Microsoft Entra ID."""

from .client import AzureOpenAIEntraHandler
from .credentials import EntraTokenProvider, build_credential
from .message_conversion import convert_message_content, convert_to_openai_messages
from .models import AZURE_OPENAI_MODELS, fallback_model_info, resolve_model

__all__ = [
    "AzureOpenAIEntraHandler",
    "EntraTokenProvider",
    "build_credential",
    "convert_message_content",
    "convert_to_openai_messages",
    "AZURE_OPENAI_MODELS",
    "fallback_model_info",
    "resolve_model",
]
