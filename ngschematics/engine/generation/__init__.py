"""Command synthesis and the interactive generation flow."""
