"""Per-entity accessors translating transport rows into view models.

Every accessor takes the store explicitly and, where the entity is family-scoped,
the family id; nothing is read from ambient state.
"""
