"""Single-owner access control for privileged registry operations."""
