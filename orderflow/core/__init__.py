"""Core plumbing: errors, settings, logging and the delivery pipeline."""
