"""Persistence implementations for keel_auth repository interfaces."""
