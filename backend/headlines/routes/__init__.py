"""
Headlines Backend — Route Handlers Package
===========================================

Routers:
    - pages:    GET /                       server-rendered homepage
    - scrape:   GET /scrape                 run the scrape ingestor
    - articles: /articles, /saved, /delete  article listing, saving, notes
                (+ legacy_router: /getNotes, /createNote aliases)
    - health:   GET /health                 monitoring probe

Routes stay thin: parse the request, call one service, return its result.
"""
