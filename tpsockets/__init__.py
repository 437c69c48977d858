"""TCP client and server exchanging length-prefixed messages and value packages."""

__version__ = "0.1.0"
__all__ = ["protocol", "client", "server"]