"""Read Go test coverage profiles and build HTML coverage reports from them."""

__version__ = "0.1.0"