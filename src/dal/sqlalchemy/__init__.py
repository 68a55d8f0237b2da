from .metadata_source import SqlAlchemyMetadataSource

__all__ = ["SqlAlchemyMetadataSource"]
