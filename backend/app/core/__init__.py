# app/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- db: Database configuration and connection management
- exceptions: Realtime error taxonomy
- registry: Live connection registry
- pubsub: Study-group channel router and broadcasting
- handlers: Session event handlers and their dispatch table
- lifecycle: Connect/disconnect hooks and the RealtimeHub coordinator
"""
