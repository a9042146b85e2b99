from desweal.storage.event_store import EventStore, TransactionEventStore

__all__ = ["EventStore", "TransactionEventStore"]
