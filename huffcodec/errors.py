class HuffmanError(Exception):
    """Base class for every error raised by huffcodec."""


class InsufficientAlphabet(HuffmanError):
    """Text has fewer than two distinct symbols, so no prefix code exists."""


class MalformedTree(HuffmanError):
    pass


class MalformedBitstream(HuffmanError, ValueError):
    pass


class UnknownSymbol(HuffmanError, KeyError):
    def __init__(self, symbol: str) -> None:
        super().__init__(symbol)
        self.symbol = symbol

    def __str__(self) -> str:
        return f"symbol {self.symbol!r} has no code in the encoding tree"
