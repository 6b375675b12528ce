# app/models/__init__.py
"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account model
- StudyGroup: Study group model; its id is the realtime channel id
"""
from .user import User
from .study_group import StudyGroup
