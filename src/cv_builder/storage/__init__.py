from cv_builder.storage.document_repository import DocumentRepository, StoredDocument

__all__ = ["DocumentRepository", "StoredDocument"]
