"""Recommendation module for ListingRec.

This module contains the distribution-weighted sampler that picks a
randomized, de-duplicated set of items whose category mix follows a
caller-supplied probability distribution.
"""
