from sqlalchemy.dialects import postgresql

from metaconsole.core.exceptions import ValidationException

# DuckDB follows the PostgreSQL identifier rules and binds parameters as "?"
preparer = postgresql.dialect(paramstyle="qmark").identifier_preparer

def _checkText(value: str, what: str) -> None:
    if value is None or not str(value).strip():
        raise ValidationException(f"{what} must not be empty.")
    if "\x00" in value:
        raise ValidationException(f"{what} must not contain NUL characters.")

def quoteIdentifier(name: str) -> str:
    _checkText(name, "Identifier")
    return preparer.quote_identifier(name)

def qualifiedTableName(namespace: str, subjectArea: str, entity: str) -> str:
    return ".".join(quoteIdentifier(part) for part in (namespace, subjectArea, entity))

def quoteLiteral(value: str) -> str:
    if "\x00" in value:
        raise ValidationException("String literal must not contain NUL characters.")
    return "'" + value.replace("'", "''") + "'"
