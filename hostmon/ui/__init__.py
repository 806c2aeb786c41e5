"""Terminal presentation of published snapshots."""
