"""StatefulMigration resource model and a reconciler that steps it through its phases."""

__version__ = "0.1.0"
__all__ = ["controller", "types"]