"""Schemas — Pydantic request models for API boundaries."""
