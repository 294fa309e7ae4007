"""
HTTP middleware.
"""

from .error_handler import ErrorHandlerMiddleware
