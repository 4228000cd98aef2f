from paintperfect.services.storage import Storage, get_storage


def get_storage_service() -> Storage:
    """FastAPI dependency for the configured storage backend (local/S3)."""
    return get_storage()
