"""Pydantic schemas for inbound catalog documents and the HTTP surface."""
