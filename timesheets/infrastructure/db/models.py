"""
SQLAlchemy models for the database.
Maps domain entities to database tables.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, DateTime, Text, Boolean, Float, Date,
    ForeignKey, Index, UniqueConstraint, CheckConstraint,
)
from sqlalchemy.types import TypeDecorator

from .database import Base


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware datetime stored as UTC.
    Naive values read back (SQLite keeps no offset) are tagged as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


ID_LENGTH = 64


class TimeEntryModel(Base):
    """Time entry table"""
    __tablename__ = 'time_entries'

    id = Column(String(ID_LENGTH), primary_key=True)
    project_id = Column(String(ID_LENGTH), nullable=False, index=True)
    author_id = Column(String(ID_LENGTH), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, default="")
    hours = Column(Float, nullable=False, default=0.0)
    entry_date = Column(Date, nullable=False)

    # Review status
    status = Column(String(20), nullable=False, default="pending")
    status_changed_at = Column(UTCDateTime)
    status_changed_by = Column(String(ID_LENGTH))
    approved_date = Column(UTCDateTime)

    # Timestamps
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    __table_args__ = (
        Index('ix_time_entries_project_status', 'project_id', 'status'),
        CheckConstraint("status IN ('pending', 'questioned', 'approved')", name='ck_time_entries_status'),
    )


class TimeSheetModel(Base):
    """Time sheet table"""
    __tablename__ = 'time_sheets'

    id = Column(String(ID_LENGTH), primary_key=True)
    project_id = Column(String(ID_LENGTH), nullable=False, index=True)
    author_id = Column(String(ID_LENGTH), nullable=False)

    title = Column(String(255), nullable=False)
    description = Column(Text, default="")

    status = Column(String(20), nullable=False, default="draft")
    submitted_at = Column(UTCDateTime)
    approved_at = Column(UTCDateTime)
    rejected_at = Column(UTCDateTime)
    rejection_reason = Column(Text)
    status_changed_by = Column(String(ID_LENGTH))

    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    __table_args__ = (
        Index('ix_time_sheets_project_status', 'project_id', 'status'),
        CheckConstraint(
            "status IN ('draft', 'submitted', 'approved', 'rejected')",
            name='ck_time_sheets_status'
        ),
    )


class TimeSheetEntryModel(Base):
    """Link between a time sheet and its entries"""
    __tablename__ = 'time_sheet_entries'

    id = Column(Integer, primary_key=True, autoincrement=True)
    time_sheet_id = Column(String(ID_LENGTH), ForeignKey('time_sheets.id', ondelete='CASCADE'), nullable=False)
    time_entry_id = Column(String(ID_LENGTH), ForeignKey('time_entries.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = Column(UTCDateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint('time_sheet_id', 'time_entry_id', name='uq_time_sheet_entries_sheet_entry'),
    )


class TimeSheetApprovalModel(Base):
    """Stage approvals of a time sheet, insert-only"""
    __tablename__ = 'time_sheet_approvals'

    id = Column(String(ID_LENGTH), primary_key=True)
    time_sheet_id = Column(String(ID_LENGTH), ForeignKey('time_sheets.id', ondelete='CASCADE'), nullable=False)
    stage = Column(String(20), nullable=False)
    approved_by = Column(String(ID_LENGTH), nullable=False)
    approved_at = Column(UTCDateTime, nullable=False)
    notes = Column(Text)

    __table_args__ = (
        UniqueConstraint('time_sheet_id', 'stage', name='uq_time_sheet_approvals_sheet_stage'),
        Index('ix_time_sheet_approvals_sheet_approved_at', 'time_sheet_id', 'approved_at'),
    )


class EntryStatusChangeModel(Base):
    """History of time entry status transitions"""
    __tablename__ = 'entry_status_changes'

    id = Column(String(ID_LENGTH), primary_key=True)
    time_entry_id = Column(String(ID_LENGTH), ForeignKey('time_entries.id', ondelete='CASCADE'), nullable=False, index=True)
    from_status = Column(String(20), nullable=False)
    to_status = Column(String(20), nullable=False)
    changed_by = Column(String(ID_LENGTH), nullable=False)
    changed_at = Column(UTCDateTime, nullable=False)
    source = Column(String(20), nullable=False, default="manual")


class EntryMessageModel(Base):
    """Comment thread messages on time entries"""
    __tablename__ = 'entry_messages'

    id = Column(String(ID_LENGTH), primary_key=True)
    time_entry_id = Column(String(ID_LENGTH), ForeignKey('time_entries.id', ondelete='CASCADE'), nullable=False, index=True)
    author_id = Column(String(ID_LENGTH), nullable=False)
    content = Column(Text, nullable=False)
    status_change = Column(String(20))
    parent_message_id = Column(String(ID_LENGTH), ForeignKey('entry_messages.id', ondelete='SET NULL'))
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)


class ProjectApprovalSettingsModel(Base):
    """Approval policy, one row per project"""
    __tablename__ = 'project_approval_settings'

    id = Column(String(ID_LENGTH), primary_key=True)
    project_id = Column(String(ID_LENGTH), nullable=False, unique=True)
    approval_mode = Column(String(20), nullable=False, default="required")
    auto_approve_after_days = Column(Integer, nullable=False, default=0)
    require_all_entries_approved = Column(Boolean, nullable=False, default=True)
    allow_self_approve_no_client = Column(Boolean, nullable=False, default=False)
    # JSON array of stage names, NULL unless configured
    approval_stages = Column(Text)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    __table_args__ = (
        CheckConstraint('auto_approve_after_days >= 0', name='ck_approval_settings_days'),
    )


class ProjectMemberModel(Base):
    """Role assignments of users on projects"""
    __tablename__ = 'project_members'

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(String(ID_LENGTH), nullable=False, index=True)
    user_id = Column(String(ID_LENGTH), nullable=False)
    role = Column(String(20), nullable=False)
    joined_at = Column(UTCDateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint('project_id', 'user_id', 'role', name='uq_project_members_project_user_role'),
    )
