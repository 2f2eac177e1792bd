"""
Database Initialization Package
Provides CLI commands and utilities for initializing the database with sample data
"""

from .init_db import init_database, clear_database

__all__ = [
    'init_database',
    'clear_database',
]
