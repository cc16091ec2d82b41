from .memory_store import MemoryStore, seed_demo_data

__all__ = ["MemoryStore", "seed_demo_data"]
