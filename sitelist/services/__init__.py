"""
SiteList Backend: Services Package
=====================================

What:  Business logic, independent of HTTP.

Service Inventory:
    - collection_service.py: CollectionService (get/add/update/delete on the collection)
    - asset_service.py:      AssetService (static asset lookup + content-type)
"""
