"""One-class-per-file model records; import via ``entra_providers.base.models``."""

from .model_info import ModelInfo
from .model_descriptor import ModelDescriptor

__all__ = ["ModelInfo", "ModelDescriptor"]
