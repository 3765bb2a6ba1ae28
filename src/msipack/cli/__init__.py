"""Command-line interface for msipack."""
