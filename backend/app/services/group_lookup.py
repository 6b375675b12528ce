# app/services/group_lookup.py
"""
Group lookup service.
Answers whether a realtime channel id names an existing StudyGroup row.
Only consulted when ENFORCE_GROUP_LOOKUP is enabled.
"""
import uuid

from app.models.study_group import StudyGroup


async def group_exists(group_id: str) -> bool:
    """
    Check whether a study group exists.

    Args:
        group_id: Channel id sent by the client (StudyGroup primary key as a string)

    Returns:
        bool: False for ids that are not UUIDs or have no matching row
    """
    try:
        pk = uuid.UUID(str(group_id))
    except ValueError:
        return False
    return await StudyGroup.filter(id=pk).exists()
