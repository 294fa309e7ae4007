"""
HTTP adapter: FastAPI routers, dependencies and middleware.
"""
