"""
Services Module

Lookups against the persistence layer used by the realtime core:
- Group lookup: checks that a study group id exists before it becomes a channel
"""

from .group_lookup import group_exists

__all__ = [
    "group_exists",
]
