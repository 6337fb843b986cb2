"""Command line entry point for jqsh.

``cli`` and ``main`` are resolved on first access so ``python -m
jqsh.cli.main`` does not find the module already imported.
"""

__all__ = ["cli", "main"]


def __getattr__(name):
    if name == "cli":
        from .main import cli

        return cli
    if name == "main":
        from .main import main

        return main
    raise AttributeError(name)
