"""
Custom Exceptions - Scientific Productivity Scoring
app/core/exceptions.py

Custom exception classes for repository and scoring operations.
"""


class RepositoryException(Exception):
    """Base exception for repository operations."""

    pass


class EntityNotFoundException(RepositoryException):
    """Entity not found in database."""

    def __init__(self, entity_type: str, entity_id):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with ID {entity_id} not found")


class DatabaseConnectionException(RepositoryException):
    """Database connection failure."""

    def __init__(self, message: str = "Database connection failed"):
        self.message = message
        super().__init__(message)


class CategoryFetchException(RepositoryException):
    """Reading one activity category for one researcher failed."""

    def __init__(self, category: str, user_id: int, reason: str = ""):
        self.category = category
        self.user_id = user_id
        self.reason = reason
        message = f"Failed to fetch {category} for researcher {user_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

