"""Configuration constants for task management functionality."""

import os

# Storage Configuration
DEFAULT_DATABASE_PATH = os.path.expanduser("~/.local-tasks/tasks.db")
DATABASE_PATH_ENV = "LOCAL_TASKS_DB"
DEFAULT_WAL_MODE = True

# Key of the slot holding the serialized task collection
STORAGE_KEY = "tasks"

# Database Schema Version
SCHEMA_VERSION = 1

# Form Validation
MIN_NAME_LENGTH = 3

# Rendering
PENDING_CONTAINER = "todo"
FINISHED_CONTAINER = "finished"

CONTROL_LABELS = {
    "finish": "finish",
    "edit": "edit",
    "restore": "bring back",
    "remove": "delete",
    "save": "save",
}
