"""
Persistence layer: declarative base, ORM models and query functions.
"""
