"""
Authentication and authorization adapters.
"""

from .jwt_handler import JWTHandler
from .capability_resolver import SQLAlchemyCapabilityResolver
