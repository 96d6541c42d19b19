"""Reference data access for the geography catalog."""
