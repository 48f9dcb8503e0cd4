"""Infrastructure layer — blob stores, database engine, contact store.

The contact store owns the in-memory collection and mirrors it to a
blob store on every change. Services never touch a blob store directly.
"""
