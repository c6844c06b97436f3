"""Slot lifecycle: state machines, persistence and the transition service."""
