"""ID generation utilities."""

import uuid


def generate_node_id() -> str:
    """Generate a unique node ID (UUID4)."""
    return str(uuid.uuid4())


def generate_edge_id() -> str:
    """Generate a unique edge ID (UUID4)."""
    return str(uuid.uuid4())
