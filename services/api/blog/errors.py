"""Error taxonomy shared by stores, services and routes.

- PostNotFoundError -> 404
- InvalidInputError -> 400
- StorageUnavailableError (and its transaction subclasses) -> 500
- CacheUnavailableError -> never surfaced; PostService absorbs it
"""


class BlogError(RuntimeError):
    """Base class for application errors."""


class PostNotFoundError(BlogError):
    def __init__(self, post_id: int):
        super().__init__(f"post {post_id} not found")
        self.post_id = post_id


class InvalidInputError(BlogError):
    pass


class StorageUnavailableError(BlogError):
    """Connection, transaction or query failure in the relational store."""


class TransactionBeginError(StorageUnavailableError):
    pass


class PostInsertError(StorageUnavailableError):
    pass


class ActivityLogInsertError(StorageUnavailableError):
    pass


class CommitError(StorageUnavailableError):
    pass


class CacheUnavailableError(BlogError):
    """Redis connectivity or protocol failure."""
