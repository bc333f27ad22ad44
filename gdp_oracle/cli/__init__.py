"""Command-line entrypoints: serve the API, resolve feeds once."""
