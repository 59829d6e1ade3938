"""Task-management dashboard: tasks, categories, filtering and productivity stats."""
__version__ = "0.1.0"
