"""Database Metadata — declarative Base shared by mentorflow.models."""
