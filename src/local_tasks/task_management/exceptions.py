"""Custom exceptions for task management functionality."""


class TaskManagementError(Exception):
    """Base exception for task management errors."""

    pass


class DatabaseError(TaskManagementError):
    """Exception raised for database related errors."""

    pass


class SchemaError(DatabaseError):
    """Exception raised for database schema errors."""

    pass


class ValidationError(TaskManagementError):
    """Exception raised when submitted form fields are rejected."""

    pass
