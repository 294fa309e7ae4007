"""
Domain layer: entities, repository ports, workflow services and events.
"""
