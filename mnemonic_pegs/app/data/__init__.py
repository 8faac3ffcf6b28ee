from .peg_store import JsonPegRepository, PegStoreError

__all__ = ["JsonPegRepository", "PegStoreError"]
