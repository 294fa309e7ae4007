"""
Database infrastructure: engine, sessions and table models.
"""

from .database import (
    Base,
    create_db_engine,
    create_session_factory,
    create_tables,
    drop_tables,
    get_engine,
    get_session_factory,
    get_db,
)
