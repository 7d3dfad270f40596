"""Route modules for the ListingRec API."""
