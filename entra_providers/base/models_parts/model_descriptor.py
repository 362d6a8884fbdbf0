"""ModelDescriptor pairing a deployment id with its resolved ModelInfo."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .model_info import ModelInfo


@dataclass(frozen=True)
class ModelDescriptor:
    """The model a handler talks to: ``id`` is the deployment name."""

    id: str
    info: ModelInfo

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "info": self.info.to_dict()}


__all__ = ["ModelDescriptor"]
