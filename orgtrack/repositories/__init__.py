"""
Persistence adapters.

Services receive a storage handle (SQLStorage) at construction and only see
whole collections of flat rows; they never open sessions themselves.
"""
