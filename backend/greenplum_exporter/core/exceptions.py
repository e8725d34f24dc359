"""Exceptions raised by the exporter."""


class ExporterException(Exception):
    """Base class for exporter errors."""

    def __init__(self, message: str = "Exporter error"):
        self.message = message
        super().__init__(self.message)


class ConnectError(ExporterException):
    """Raised when a connection to Greenplum cannot be opened."""

    def __init__(self, message: str = "Could not connect to the database"):
        super().__init__(message)


class QueryError(ExporterException):
    """Raised when a diagnostic query fails or does not yield exactly one value."""

    def __init__(self, query: str, message: str = "Query failed"):
        self.query = query
        super().__init__(message)
