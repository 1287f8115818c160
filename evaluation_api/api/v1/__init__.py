"""
API v1 routers.
"""

from evaluation_api.api.v1 import evaluation, health

__all__ = ["evaluation", "health"]
