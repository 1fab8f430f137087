"""Session-scoped identifiers for columns and tasks.

IDs are never derived from content and never written to the document.
"""

import uuid


def generate_column_id() -> str:
    """Generate a column ID: ``col-<uuid4>``."""
    return f"col-{uuid.uuid4()}"


def generate_task_id() -> str:
    """Generate a task ID: ``task-<uuid4>``."""
    return f"task-{uuid.uuid4()}"


def short_id(prefixed_id: str) -> str:
    """First 8 characters of the UUID part, for log lines."""
    _, _, rest = prefixed_id.partition("-")
    return (rest or prefixed_id)[:8]
