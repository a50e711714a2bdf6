"""
Headlines Backend — Services Layer
===================================

What:  Business logic between routes (HTTP) and the database (persistence).

Service Inventory:
    - ArticleStore:     article queries and updates
    - NoteStore:        free-form note inserts
    - LinkageWorkflow:  create a note, then point an article at it
    - ScrapeIngestor:   fetch → parse → one article per listing

Stores are stateless and take an AsyncSession per call; the session comes
from the application's Database, never from a module-level engine.
"""
