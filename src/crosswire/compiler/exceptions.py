class CompilerError(Exception):
    """Base class for compilation failures."""

    pass


class MalformedNodeError(CompilerError):
    """Raised when a node violates the canonical tree invariants."""

    def __init__(self, node_name: str, message: str):
        self.node_name = node_name
        super().__init__(f"<{node_name}> {message}")


class FormatterError(CompilerError):
    """Raised when the external formatter is unavailable or rejects the code."""

    pass


class CompilerConfigError(CompilerError, ValueError):
    """Raised on invalid compiler options."""

    pass
