"""
SiteList Backend: Routes Package
===================================

Route Inventory:
    - gateway.py: every method, every path. Classifies the request and hands
                  it to the preflight responder, the API dispatcher or the
                  static asset server.

Routes stay thin: decoding and response shaping here, collection logic in
services/collection_service.py, asset lookup in services/asset_service.py.
"""
