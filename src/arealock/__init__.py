"""Area unlock and task-grid progression engine."""

__version__ = "0.1.0"
