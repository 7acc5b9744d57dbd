"""Request pipeline: dispatch, static resolution, HTML injection, sending."""
