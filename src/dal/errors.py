class MetadataAccessError(RuntimeError):
    """Raised when the catalog cannot be read through the metadata source."""
