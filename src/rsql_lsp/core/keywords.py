"""SQL vocabulary used for completion and highlighting (DuckDB dialect)."""

# Completion phrases, in the order they are offered
SQL_KEYWORDS = (
    "SELECT", "FROM", "WHERE", "JOIN", "LEFT JOIN", "RIGHT JOIN", "INNER JOIN", "OUTER JOIN",
    "ON", "GROUP BY", "HAVING", "ORDER BY", "LIMIT", "OFFSET",
    "INSERT", "INTO", "VALUES", "UPDATE", "SET", "DELETE",
    "CREATE", "TABLE", "VIEW", "INDEX", "DROP", "ALTER",
    "AS", "AND", "OR", "NOT", "IN", "EXISTS", "BETWEEN", "LIKE", "IS NULL", "IS NOT NULL",
    "DISTINCT", "ALL", "ASC", "DESC", "UNION", "INTERSECT", "EXCEPT",
    "WITH", "RECURSIVE", "WINDOW", "PARTITION BY", "OVER",
    "NULLS FIRST", "NULLS LAST",
    # DuckDB select modifiers
    "EXCLUDE", "REPLACE", "COLUMNS",
    # DuckDB commands
    "INSTALL", "LOAD", "ATTACH", "DETACH", "USE", "PRAGMA", "COPY", "EXPORT",
    "SHOW", "TABLES", "DESCRIBE", "SUMMARIZE", "EXPLAIN",
    "CASE", "WHEN", "THEN", "ELSE", "END", "CAST", "USING", "RETURNING",
    "CROSS JOIN", "FULL OUTER JOIN", "NATURAL JOIN", "SEMI JOIN", "ANTI JOIN",
    "QUALIFY", "ASOF JOIN", "POSITIONAL JOIN",
)

# Single words highlighted as keywords
SQL_KEYWORD_TOKENS = frozenset({
    "SELECT", "FROM", "WHERE", "GROUP", "BY", "ORDER", "HAVING", "LIMIT", "OFFSET",
    "INSERT", "INTO", "VALUES", "UPDATE", "SET", "DELETE", "CREATE", "TABLE",
    "DROP", "ALTER", "INDEX", "VIEW", "JOIN", "INNER", "LEFT", "RIGHT", "FULL",
    "OUTER", "CROSS", "ON", "USING", "AS", "AND", "OR", "NOT", "IN", "EXISTS",
    "BETWEEN", "LIKE", "IS", "NULL", "TRUE", "FALSE", "CASE", "WHEN", "THEN",
    "ELSE", "END", "DISTINCT", "ALL", "UNION", "INTERSECT", "EXCEPT", "WITH",
    "RECURSIVE", "CAST", "INTERVAL", "ASC", "DESC", "NULLS", "FIRST", "LAST",
    "INSTALL", "LOAD", "ATTACH", "DETACH", "COPY", "EXPORT", "IMPORT",
    "PRAGMA", "DESCRIBE", "SHOW", "SUMMARIZE", "PIVOT", "UNPIVOT",
    "EXPLAIN", "ANALYZE", "VACUUM", "CHECKPOINT", "FORCE",
    "PRIMARY", "KEY", "FOREIGN", "REFERENCES", "CONSTRAINT", "UNIQUE",
    "CHECK", "DEFAULT", "SEQUENCE", "GENERATED",
    "TEMPORARY", "TEMP", "IF", "REPLACE",
    "RETURNING", "CONFLICT", "DO", "NOTHING",
    "WINDOW", "OVER", "PARTITION", "RANGE", "ROWS", "PRECEDING", "FOLLOWING",
    "UNBOUNDED", "CURRENT", "ROW", "FILTER", "EXCLUDE", "COLUMNS", "QUALIFY",
    # Types
    "INTEGER", "INT", "BIGINT", "SMALLINT", "TINYINT", "HUGEINT",
    "DOUBLE", "REAL", "FLOAT", "DECIMAL", "NUMERIC",
    "VARCHAR", "CHAR", "TEXT", "STRING",
    "DATE", "TIME", "TIMESTAMP", "TIMESTAMPTZ",
    "BOOLEAN", "BOOL", "BLOB", "BYTEA",
    "JSON", "ARRAY", "LIST", "STRUCT", "MAP",
    "UUID", "ENUM",
})

# Common DuckDB functions, highlighted even without a following '('
SQL_FUNCTION_TOKENS = frozenset({
    "COUNT", "SUM", "AVG", "MIN", "MAX", "STRING_AGG", "ARRAY_AGG",
    "CONCAT", "UPPER", "LOWER", "SUBSTRING", "TRIM", "LENGTH",
    "DATE_TRUNC", "EXTRACT", "NOW", "CURRENT_DATE", "CURRENT_TIMESTAMP",
    "STRFTIME", "MAKE_DATE", "MAKE_TIMESTAMP",
    "COALESCE", "NULLIF", "GREATEST", "LEAST",
    "ROW_NUMBER", "RANK", "DENSE_RANK", "LAG", "LEAD",
    "FIRST_VALUE", "LAST_VALUE", "NTH_VALUE",
    "UNNEST", "LIST_VALUE", "STRUCT_PACK", "REGEXP_MATCHES",
})

# A keyword from this set makes the following identifiers table-like
TABLE_CONTEXT_KEYWORDS = frozenset({
    "FROM", "JOIN", "INNER", "LEFT", "RIGHT", "OUTER", "CROSS", "INTO", "TABLE", "VIEW",
})
