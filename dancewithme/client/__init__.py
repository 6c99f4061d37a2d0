"""Polling client: HTTP wrapper, poll timer and per-screen state."""
