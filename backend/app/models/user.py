# app/models/user.py
"""
Database model for users.
Represents a user account of the study-group application.
"""
import uuid
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many created StudyGroups (one-to-many, via related_name="created_groups")

    Credentials are stored as a hash only; issuing and checking them is
    handled outside this service.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Primary key: unique user identifier
    username = fields.CharField(max_length=256, unique=True)  # Display/login name (must be unique)
    email = fields.CharField(max_length=256, unique=True)  # Email address (must be unique)
    password_hash = fields.CharField(max_length=255)  # Hashed password, never plain text
    avatar = fields.CharField(max_length=512, default="default-avatar.png")
    status = fields.CharField(max_length=16, default="offline")  # "online" / "offline"
    last_active = fields.DatetimeField(auto_now_add=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"
