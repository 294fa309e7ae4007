"""
Domain services for the approval workflow.
This module exports the workflow services and their ports.
"""

from .clock import Clock, SystemClock
from .capabilities import CapabilityResolver, ProjectRole, EntryPermission
from .stage_sequencer import StageSequencer, StageProgress
from .entry_workflow import EntryWorkflowService, StatusOverride
from .sheet_workflow import (
    SheetWorkflowService,
    StageApprovalOutcome,
    SheetApprovalStatus,
    SheetReadiness,
)
from .auto_approval import AutoApprovalPolicy, SheetAutoAction

__all__ = [
    "Clock",
    "SystemClock",
    "CapabilityResolver",
    "ProjectRole",
    "EntryPermission",
    "StageSequencer",
    "StageProgress",
    "EntryWorkflowService",
    "StatusOverride",
    "SheetWorkflowService",
    "StageApprovalOutcome",
    "SheetApprovalStatus",
    "SheetReadiness",
    "AutoApprovalPolicy",
    "SheetAutoAction",
]
