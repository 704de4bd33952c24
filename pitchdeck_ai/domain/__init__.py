"""
Domain layer: value objects, request/result entities and generation errors.
"""
