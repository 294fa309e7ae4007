"""
SQLAlchemy unit of work: one session, one transaction.
"""

from sqlalchemy.orm import Session, sessionmaker

from timesheets.domain.repositories.unit_of_work import UnitOfWork
from .time_entry_repository import SQLAlchemyTimeEntryRepository
from .time_sheet_repository import SQLAlchemyTimeSheetRepository
from .approval_repository import (
    SQLAlchemyTimeSheetApprovalRepository,
    SQLAlchemyEntryStatusChangeRepository,
    SQLAlchemyEntryMessageRepository,
)
from .approval_settings_repository import SQLAlchemyApprovalSettingsRepository


class SQLAlchemyUnitOfWork(UnitOfWork):
    """Unit of work backed by a fresh SQLAlchemy session."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory
        self.session: Session = None

    def __enter__(self) -> "SQLAlchemyUnitOfWork":
        self.session = self.session_factory()
        self.time_entries = SQLAlchemyTimeEntryRepository(self.session)
        self.time_sheets = SQLAlchemyTimeSheetRepository(self.session)
        self.approvals = SQLAlchemyTimeSheetApprovalRepository(self.session)
        self.status_changes = SQLAlchemyEntryStatusChangeRepository(self.session)
        self.messages = SQLAlchemyEntryMessageRepository(self.session)
        self.settings = SQLAlchemyApprovalSettingsRepository(self.session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            super().__exit__(exc_type, exc, tb)
        finally:
            self.session.close()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
