"""Discord webhook relay with a short-lived message log."""
