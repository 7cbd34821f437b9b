"""Domain layer - instances, discovery, the workflow aggregate and contracts."""
