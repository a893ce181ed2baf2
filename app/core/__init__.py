"""
Core Package - Scientific Productivity Scoring
app/core/__init__.py

Core infrastructure: exceptions, dependencies (import app.core.dependencies
directly; it pulls in the repositories, which themselves use these exceptions).
"""

from app.core.exceptions import (
    CategoryFetchException,
    DatabaseConnectionException,
    EntityNotFoundException,
    RepositoryException,
)

__all__ = [
    "CategoryFetchException",
    "DatabaseConnectionException",
    "EntityNotFoundException",
    "RepositoryException",
]
