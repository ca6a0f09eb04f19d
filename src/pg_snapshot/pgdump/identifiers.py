"""SQL identifier quoting for schema and table names."""

from sqlalchemy.dialects.postgresql.base import PGDialect

_preparer = PGDialect().identifier_preparer


def quote_identifier(name: str) -> str:
    """Quote a PostgreSQL identifier when the server would otherwise fold or reject it.

    Lower-case names made of legal characters are returned unchanged;
    names with upper case, special characters, or reserved words are
    double-quoted with embedded quotes doubled.

    Example:
        >>> quote_identifier("test_schema")
        'test_schema'
        >>> quote_identifier("My Schema")
        '"My Schema"'
        >>> quote_identifier("user")
        '"user"'
    """
    return _preparer.quote(name)
