# Routes package init
"""
ReferenceHub Backend — Routes Package
=====================================

Route Inventory:
    - pages.py:    GET  /                 (listing + search page)
                   POST /entries          (form submission, 303 on success)
    - entries.py:  GET  /api/entries      (JSON search)
                   POST /api/entries      (JSON create)
    - oembed.py:   GET  /api/oembed       (embed HTML proxy)
    - health.py:   GET  /health           (service health check)

Routes stay thin: extract request data, call the validator and the entry
repository, pick the status code.
"""
