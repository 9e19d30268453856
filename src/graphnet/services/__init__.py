"""Service layer: traversal, transactions and the ServiceResult adapter.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
