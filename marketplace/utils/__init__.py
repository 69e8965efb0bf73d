"""
Shared helpers: document serialization and FastAPI dependencies.
"""
