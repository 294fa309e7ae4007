"""
Periodic auto-approval sweep.

Runs RunAutoApprovalSweepUseCase on a fixed interval inside the web
process event loop. A pass that fails on the store is logged and the
runner waits for the next tick.
"""

import asyncio
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from timesheets.application.dto.auto_approval_dto import SweepReportDTO
from timesheets.application.use_cases.auto_approval_use_cases import RunAutoApprovalSweepUseCase
from timesheets.application.use_cases.base_use_case import WorkflowContext


logger = logging.getLogger(__name__)


class AutoApprovalSweepRunner:
    """Drives the auto-approval sweep as an asyncio background task."""

    def __init__(self, context: WorkflowContext, interval_seconds: int = 3600):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.context = context
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self._is_sweeping = False

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop."""
        if self.is_running:
            logger.warning("Auto-approval sweep runner already started")
            return
        self._task = asyncio.create_task(self._loop(), name="auto-approval-sweep")
        logger.info(f"Auto-approval sweep scheduled every {self.interval_seconds}s")

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None
        logger.info("Auto-approval sweep runner stopped")

    async def run_once(self) -> Optional[SweepReportDTO]:
        """
        Run a single sweep pass.

        Returns None when a pass is already in progress or the store failed.
        """
        if self._is_sweeping:
            logger.warning("Auto-approval sweep already in progress, skipping")
            return None

        self._is_sweeping = True
        try:
            return await RunAutoApprovalSweepUseCase(self.context).run()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Auto-approval sweep failed: {str(e)}", exc_info=True)
            return None
        finally:
            self._is_sweeping = False

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self._tick()

    async def _tick(self) -> None:
        """One scheduled pass; an unexpected error is logged so the next tick still runs."""
        try:
            await self.run_once()
        except Exception as e:
            logger.error(f"Unexpected error in auto-approval sweep: {str(e)}", exc_info=True)
