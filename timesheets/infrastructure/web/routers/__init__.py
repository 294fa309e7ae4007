"""
API routers.
"""

from . import health, time_entries, time_sheets, approval_settings
