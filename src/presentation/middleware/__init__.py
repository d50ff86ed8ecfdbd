"""
Middleware layer for Bastion.

Cross-cutting request processing: correlation IDs for log tracing.
"""

from src.presentation.middleware.correlation import CorrelationIDMiddleware

__all__ = ["CorrelationIDMiddleware"]
