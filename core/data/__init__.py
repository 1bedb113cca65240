"""Data layer - infrastructure persistence and mapping."""

from .database import create_engine, create_session_factory, create_tables
from .models import Base
from .uow import UnitOfWork, create_uow

__all__ = [
    "Base",
    "create_engine",
    "create_session_factory",
    "create_tables",
    "create_uow",
    "UnitOfWork",
]
