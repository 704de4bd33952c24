"""
Infrastructure adapters: configuration, logging, metrics and generation backends.
"""
