"""Query-executing methods recognized at call sites.

Maps a method name to the zero-based index of its query-text argument.
``database/sql`` and ``sqlx`` context methods take ``(ctx, query, ...)``;
``GetContext`` and ``SelectContext`` scan into a destination first and take
``(ctx, dest, query, ...)``.

Supporting another method means adding it here.
"""

from types import MappingProxyType
from typing import Final

QUERY_ARG_INDEX: Final = MappingProxyType(
    {
        "ExecContext": 1,
        "QueryContext": 1,
        "QueryRowContext": 1,
        "NamedExecContext": 1,
        "NamedQueryContext": 1,
        "PrepareContext": 1,
        "PrepareNamedContext": 1,
        "GetContext": 2,
        "SelectContext": 2,
    }
)
