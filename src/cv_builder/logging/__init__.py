"""Editing-session activity log (saves, exports, resets)."""
