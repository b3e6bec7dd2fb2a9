class TreeError(Exception):
    """Base class for tree errors"""

    pass


class TreeValidationError(TreeError):
    """Raised when a request is rejected before touching storage"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TreeNodeNotFoundError(TreeError):
    """Raised when a tree node cannot be found"""

    pass


class TreeOperationError(TreeError):
    """Raised when a write would break the shape of the tree"""

    pass
