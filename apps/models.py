"""
Model registration: import every table model here so SQLModel.metadata sees it
(test fixtures create the schema from this metadata).
"""
from apps.security.models import User

__all__ = ["User"]
