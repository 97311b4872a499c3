# src/quorum_stage/core/__init__.py
"""Configuration, security and error types."""
