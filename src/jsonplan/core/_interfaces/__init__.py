from jsonplan.core._interfaces.catalog import BaseCatalog

__all__ = ["BaseCatalog"]
