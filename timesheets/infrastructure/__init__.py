"""
Infrastructure layer: persistence, auth, HTTP and background jobs.
"""
