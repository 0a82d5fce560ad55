"""Utility functions for the invoice dashboard."""

from .activity import log_activity
from .pagination import build_pagination_args, get_per_page

__all__ = ["log_activity", "build_pagination_args", "get_per_page"]
