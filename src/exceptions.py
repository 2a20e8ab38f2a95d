class PaymentsError(Exception):
    """Base class for errors raised by the payments ledger."""


class InputFileError(PaymentsError):
    """The transaction input could not be acquired; nothing was processed."""


class MissingInputError(InputFileError):
    def __init__(self):
        super().__init__("Cannot continue, please provide a file name for parsing.")


class InvalidExtensionError(InputFileError):
    def __init__(self, path: str):
        self.path = path
        super().__init__("Cannot continue, file extension must end with '.csv'.")


class InputNotFoundError(InputFileError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Cannot continue, file '{path}' does not exist.")


class NotAFileError(InputFileError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Cannot continue, '{path}' is not a file.")


class InputNotReadableError(InputFileError):
    def __init__(self, path: str, reason: str = "unable to read file"):
        self.path = path
        super().__init__(f"Cannot continue, {reason} '{path}'.")
