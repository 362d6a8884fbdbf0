"""
Provider-agnostic model records public surface.

Re-exports the one-class-per-file implementations under
``entra_providers.base.models_parts``.
"""

from .models_parts.model_info import ModelInfo
from .models_parts.model_descriptor import ModelDescriptor

__all__ = ["ModelInfo", "ModelDescriptor"]
