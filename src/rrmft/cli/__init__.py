"""rrmft command line interface."""
