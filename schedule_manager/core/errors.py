# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain exceptions surfaced by the service layer.
"""


class PersistenceError(RuntimeError):
    """Writing a collection to disk failed.

    Raised after the in-memory change has already been applied; memory and
    disk stay diverged until the next successful write.
    """

    def __init__(self, collection: str, operation: str) -> None:
        self.collection = collection
        self.operation = operation
        super().__init__(f"Failed to persist {collection} after {operation}")
