"""Syllabus parsing, summary reconciliation, and topic progress tracking."""
