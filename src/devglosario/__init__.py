"""devglosario: translate the comments and strings of code snippets to Spanish."""

__version__ = "0.3.0"
