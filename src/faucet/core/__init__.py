"""Scoring engine and its collaborators."""
