"""
Unicode-aware lowercasing for case-insensitive text lookups.

SQLite's LOWER() and LIKE only fold ASCII letters, so "YAOUNDÉ" would never
match "Yaoundé". On SQLite, UnicodeLower compiles to a Python-backed SQL
function registered on every new connection; other backends use LOWER().
"""
from django.db.models import CharField, Func

SQLITE_LOWER_FUNCTION = 'UNICODE_LOWER'


def _unicode_lower(value):
    if value is None:
        return None
    return str(value).lower()


def register_sqlite_functions(sender, connection, **kwargs):
    """connection_created receiver"""
    if connection.vendor == 'sqlite':
        connection.connection.create_function(
            SQLITE_LOWER_FUNCTION, 1, _unicode_lower, deterministic=True
        )


class UnicodeLower(Func):
    function = 'LOWER'
    output_field = CharField()

    def as_sqlite(self, compiler, connection, **extra_context):
        return super().as_sql(compiler, connection, function=SQLITE_LOWER_FUNCTION, **extra_context)
