"""Error kinds raised by the query engines.

Every error derives from QueryError so transports can map the family at once.
Filter and order-by text on the tabular path never raise: unparseable input
is ignored there.
"""


class QueryError(Exception):
    """Base class for query execution failures."""
    pass


class ConfigurationError(QueryError):
    """Backing-store location is missing from configuration."""
    pass


class NotFound(QueryError):
    """A source file, sheet or table does not exist."""
    pass


class SourceNotFound(NotFound):
    """The database or workbook file is absent."""
    pass


class SheetNotFound(NotFound):
    """The workbook has no sheet with the requested name."""
    pass


class UnsupportedEngine(QueryError):
    """The request names an engine other than relational/tabular."""
    pass


class JoinKeyNotFound(QueryError):
    """A join key column is absent from a row being joined."""
    pass


class UnsafeExpression(QueryError):
    """A SQL fragment cannot be compiled without raw interpolation."""
    pass


class SheetFormatError(QueryError):
    """A sheet header cannot be turned into unique column names."""
    pass


class QueryTimeout(QueryError):
    """The caller-supplied deadline elapsed before the query finished."""
    pass


class ExportError(QueryError):
    """Writing the result sheet failed. Reported as a warning, not raised."""
    pass
