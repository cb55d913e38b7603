from wordstore.store import EditAction, EditRejected, WordStore
from wordstore.files import WordListError, flush_store, load_store

__all__ = ["EditAction", "EditRejected", "WordStore", "WordListError", "flush_store", "load_store"]
