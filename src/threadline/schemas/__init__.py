"""Pydantic schemas for inputs and the shaped results returned to callers."""
