"""
Shared module - Base model, audit columns and API schema base.
"""

from academy.modules.shared.models import AuditMixin, BaseModel
from academy.modules.shared.schemas import CamelModel, UUIDStr

__all__ = ["BaseModel", "AuditMixin", "CamelModel", "UUIDStr"]
