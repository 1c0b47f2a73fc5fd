"""
Use cases for the orgtrack backend.

Each service owns one collection and works on whole collections through an
explicit SQLStorage handle: read the list, change it in memory, write it back.
Routers call these services and never touch the storage rows directly, except
for the raw /api/database endpoints.
"""
