# Catalog defaults
DEFAULT_CATALOG_NAME = "default_catalog"
DEFAULT_DATABASE_NAME = "default_database"

# Separator between module and qualified name in class paths, e.g. "pkg.mod:Outer.Inner"
CLASS_PATH_SEPARATOR = ":"

# JSON plan field names
IDENTIFIER_KEY = "identifier"
RESOLVED_TABLE_KEY = "resolved_table"
SCHEMA_KEY = "schema"
OPTIONS_KEY = "options"
COMMENT_KEY = "comment"
SYSTEM_NAME_KEY = "system_name"
CATALOG_NAME_KEY = "catalog_name"
CLASS_KEY = "class"

PRETTY_PRINT_INDENT = "  "
JSON_INDENT = 2
