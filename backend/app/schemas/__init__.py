# app/schemas/__init__.py
"""
Schema module initialization.
Exports all schema classes from submodules for convenient imports.
"""
from .realtime import *
from .system import *
