"""Query extraction: constant table and query-call visitor."""

from sqlprep.extract.constants import (
    ConstantEntry,
    ConstantEvaluator,
    ConstantSite,
    ConstantTable,
    build_constant_table,
    exact_string,
)
from sqlprep.extract.finder import QueryFinder, QuerySite
from sqlprep.extract.methods import QUERY_ARG_INDEX

__all__ = [
    "QUERY_ARG_INDEX",
    "ConstantEntry",
    "ConstantEvaluator",
    "ConstantSite",
    "ConstantTable",
    "QueryFinder",
    "QuerySite",
    "build_constant_table",
    "exact_string",
]
