"""Autosave, export and session orchestration around the document store."""
