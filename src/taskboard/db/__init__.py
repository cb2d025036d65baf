from taskboard.db.gateway import Between, Collection, Contains, Database, Document, In, UpdateResult

__all__ = [
    "Between",
    "Collection",
    "Contains",
    "Database",
    "Document",
    "In",
    "UpdateResult",
]
