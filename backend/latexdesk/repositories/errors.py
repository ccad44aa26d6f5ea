# latexdesk/repositories/errors.py


class RecordNotFoundError(ValueError):
    """Project or file does not exist (or is deleted, or belongs to someone else)."""


class InvalidNameError(ValueError):
    pass


class InvalidParentError(ValueError):
    """Parent is missing, deleted, or not a folder of the same project."""


class InvalidMoveError(ValueError):
    """Move refused: it would put a folder inside itself or one of its descendants."""


class NotAFileError(ValueError):
    pass
