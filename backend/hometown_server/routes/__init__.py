# Routes package init
"""
Hometown Content Server — API Routes Package
==============================================

Route Inventory:
    - upload.py:   POST /api/upload     (store an image/audio file)
    - content.py:  GET  /api/data       (read the content document)
                   POST /api/data       (replace the content document)
    - health.py:   GET  /health         (service health check)

Static files (/uploads/* and the site root) are mounted in main.py after
these routers, so API paths always win.

Routes stay thin: pull data out of the request, call a store, shape the
response. Errors are raised, not returned; main.py's handlers format them.
"""
