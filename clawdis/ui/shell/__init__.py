"""Single-shot command-line handlers."""
