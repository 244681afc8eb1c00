"""Configuration constants for stickfig."""
