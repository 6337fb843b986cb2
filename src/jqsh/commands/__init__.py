"""Interactive shell commands.

Each command is a click command taking the running Session as its object.
``build_library`` assembles them into the dispatch table once at startup.
"""

from ..library import Library
from ..reader import SYNTAX_DOCS
from .filter import filter
from .load import load
from .peek import peek
from .pipe import exec_, pipe
from .pop import pop, popall
from .push import push
from .quit import quit
from .script import script
from .write import raw, write


def build_library() -> Library:
    """Return a Library with every shell command and help topic registered.

    Raises:
        RegistrationError: If two commands or topics share a name
    """
    lib = Library()
    lib.register("push", push)
    lib.register("pop", pop)
    lib.register("popall", popall)
    lib.register("peek", peek)
    lib.register("filter", filter)
    lib.register("script", script)
    lib.register("load", load)
    lib.register("exec", exec_)
    lib.register("pipe", pipe)
    lib.register("write", write)
    lib.register("raw", raw)
    lib.register("quit", quit)
    lib.register_topic("syntax", SYNTAX_DOCS)
    return lib


__all__ = ["build_library"]
