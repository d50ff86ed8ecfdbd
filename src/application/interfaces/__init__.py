"""
Application layer interfaces (ports).

These protocols define the contracts between the application layer
and the infrastructure layer, following the Dependency Inversion Principle.
"""

from src.application.interfaces.repositories import (IOwnedResourceRepository,
                                                     IPermissionRepository)
from src.application.interfaces.services import (IOwnershipResolver,
                                                 IPermissionEvaluator)

__all__ = [
    # Repository interfaces
    "IOwnedResourceRepository",
    "IPermissionRepository",
    # Service interfaces
    "IPermissionEvaluator",
    "IOwnershipResolver",
]
