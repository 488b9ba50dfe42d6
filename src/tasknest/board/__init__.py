"""Folder boards: records, ordering, urgency, store, and read projections.

The services here keep every ``(folder, status)`` column and the folder list
contiguously ordered across creates, moves, and deletes.
"""
