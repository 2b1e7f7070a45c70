"""Feature modules for clinic-records.

Each entity table lives in its own feature package with an entity
dataclass and a repository; the keyset pagination engine they share lives
in ``pagination``.
"""
