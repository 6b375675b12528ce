# app/models/study_group.py
"""
Database model for study groups.
A study group's id doubles as the id of its realtime channel.
"""
import uuid
from tortoise import fields, models

class StudyGroup(models.Model):
    """
    StudyGroup database model.

    Relationships:
    - Belongs to the User who created it (many-to-one, nullable)

    The JSON columns (members, timer, tasks, messages, resources, settings,
    stats) are owned by the frontend features that use them and are stored
    without a fixed schema.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    name = fields.CharField(max_length=128)
    description = fields.TextField(null=True)
    subject = fields.CharField(max_length=128, null=True)
    code = fields.CharField(max_length=32, null=True)  # Invite code
    created_by = fields.ForeignKeyField(
        "models.User",
        related_name="created_groups",
        null=True,
        on_delete=fields.SET_NULL,
    )
    max_members = fields.IntField(null=True)
    is_private = fields.BooleanField(default=False)
    members = fields.JSONField(default=list)
    timer = fields.JSONField(default=dict)
    tasks = fields.JSONField(default=list)
    messages = fields.JSONField(default=list)
    resources = fields.JSONField(default=list)
    settings = fields.JSONField(default=dict)
    stats = fields.JSONField(default=dict)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)  # Refreshed on every save

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "study_groups"
