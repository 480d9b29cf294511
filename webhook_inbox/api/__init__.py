"""HTTP API for the webhook inbox."""
