# Services package init
"""
ReferenceHub Backend — Services Layer
=====================================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Pure helpers (normalizer, validator, search) plus stateful services
       composed once per app by dependencies.build_entry_repository().

Service Inventory:
    - url_normalizer:  canonical URL string + hostname (pydantic AnyUrl)
    - validation:      first-error-wins checks for submitted fields
    - embed_service:   oEmbed lookups for status-post URLs (httpx)
    - search:          query sanitizing, in-memory predicate, SQL clause
    - store_base:      EntryStore interface
    - sql_store:       SQLAlchemy-backed EntryStore (primary)
    - memory_store:    bounded in-process EntryStore (fallback)
    - fallback_store:  try-primary, delegate-to-fallback wrapper
    - entry_service:   EntryRepository, the only writer of entries
"""
