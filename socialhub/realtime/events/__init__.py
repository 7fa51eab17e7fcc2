"""Sync entry points for Django views that need to push realtime events."""
