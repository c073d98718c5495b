"""
Declarative base shared by all ORM models.

Import this module (not prm.core.database) from model files to avoid circular imports.
"""
from sqlalchemy.orm import declarative_base

Base = declarative_base()
