"""jqsh: an interactive shell for exploring JSON with jq filter stacks."""

__all__ = ["__version__"]

__version__ = "0.5.0"
