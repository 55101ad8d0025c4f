"""Pydantic models for sessions, assessments, snapshots and provider results."""
