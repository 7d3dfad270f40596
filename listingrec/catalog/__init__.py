"""Item catalog for ListingRec.

Holds items, categories and images, maps them to preview and detail views,
and records which users viewed which items.
"""
