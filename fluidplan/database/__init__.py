"""Persistence layer for fluidplan (SQLAlchemy)."""
