"""Platform-facing metric collectors."""
