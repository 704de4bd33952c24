"""
Application layer: backend port, prompt building and generation services.
"""
