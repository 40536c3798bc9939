"""Exceptions raised by the memory card codec."""


class Ps2mcaError(Exception):
    pass


class CardSizeError(Ps2mcaError, ValueError):
    """Input image does not have the size its format requires."""

    def __init__(self, actual: int, expected: int):
        super().__init__(
            f"Memory card has an unexpected size: {actual} (expected {expected})")
        self.actual = actual
        self.expected = expected


class CardIOError(Ps2mcaError, OSError):
    pass


class CardOpenError(CardIOError):
    pass


class CardReadError(CardIOError):
    pass


class CardWriteError(CardIOError):
    pass


class EccError(Ps2mcaError, ValueError):
    """A page carries an ECC mismatch that cannot be corrected."""

    def __init__(self, page: int):
        super().__init__(f"Uncorrectable ECC error in page {page}")
        self.page = page
