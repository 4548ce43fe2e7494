class DataAccessError(Exception):
    """Raised by repositories when the underlying storage fails."""
