"""
Background scheduling for periodic workflow jobs.
"""

from .sweep_runner import AutoApprovalSweepRunner
