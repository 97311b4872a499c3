"""Quorum Stage: community question and answer service."""
