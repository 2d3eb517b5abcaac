from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .migration import Migration


class MigrationError(Exception):
    pass


class InvalidVersionName(MigrationError):
    pass


class DuplicateVersion(MigrationError):
    pass


class UnterminatedStatement(MigrationError):
    def __init__(self, message: Optional[str] = None, line_separator: str = ""):
        if message is None:
            if line_separator:
                message = (
                    "The last statement must be ended by a semicolon, "
                    f"a line whose contents are {line_separator!r}, "
                    "or '-- +migrate StatementEnd' marker."
                )
            else:
                message = (
                    "The last statement must be ended by a semicolon "
                    "or '-- +migrate StatementEnd' marker."
                )
        self.line_separator = line_separator
        super().__init__(message)


class DanglingStatementBlock(MigrationError):
    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "Saw '-- +migrate StatementBegin' with no matching '-- +migrate StatementEnd'."
        )


class NoDirectionFound(MigrationError):
    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message or "No Up/Down annotations found, so no statements were executed."
        )


class MalformedDirective(MigrationError):
    pass


class TxError(MigrationError):
    """
    Raised when a statement or a bookkeeping write fails inside the migration transaction.
    Carries the migration that was being handled and the database error.
    """

    def __init__(self, migration: "Migration", error: Exception):
        self.migration = migration
        self.error = error
        super().__init__(f"{error} handling {migration.version}")

