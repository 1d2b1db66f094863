"""Error taxonomy shared by the storage layers and the HTTP routes."""


class FileServiceError(Exception):
    """Base class. `status_code` is what the HTTP layer answers with."""

    status_code = 500
    default_message = "Internal storage error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class EmptyUploadError(FileServiceError):
    status_code = 400
    default_message = "No file uploaded."


class StoredFileNotFoundError(FileServiceError):
    status_code = 404
    default_message = "File not found."


class StorageWriteError(FileServiceError):
    default_message = "Could not write to file storage."


class CatalogWriteError(FileServiceError):
    default_message = "Could not save to the database."


class CatalogReadError(FileServiceError):
    default_message = "Could not read from the database."


class BlobNotFoundError(FileServiceError):
    """Blob-level miss. The file service translates or tolerates it."""

    status_code = 404
    default_message = "Blob not found."
