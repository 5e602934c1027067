"""
Error Sink
fieldserde

Per-call error collection for a single serialize() traversal. A fresh sink
is created at the start of every call, so nothing per-call is ever stored on
the Serializer itself.
"""


class ErrorSink:
    """Flat path -> message mapping plus the current nesting depth."""

    def __init__(self, max_depth: int = 32, depth: int = 0):
        self.max_depth = max_depth
        self.depth = depth
        self.errors: dict[str, str] = {}

    def report_error(self, path: str, message: str) -> None:
        """Record a message for path. A later message for the same path wins."""
        self.errors[path] = message

    def descend(self) -> "ErrorSink":
        """Fresh sink for a nested serializer, one level deeper."""
        return ErrorSink(max_depth=self.max_depth, depth=self.depth + 1)

    @property
    def exhausted(self) -> bool:
        return self.depth > self.max_depth

    def merge(self, nested: "ErrorSink", prefix: str) -> None:
        """Copy a nested sink's errors in, as ``<prefix>.<childPath>``."""
        for path, message in nested.errors.items():
            self.report_error(f"{prefix}.{path}", message)

    def __len__(self) -> int:
        return len(self.errors)
