"""Single source of truth for the keyfall version."""

__version__: str = "0.3.0"
