# Importing both models registers them with Base.metadata and lets the
# string-based relationship targets ("Review", "Listing") resolve.
from wanderlust.models.listing import Listing
from wanderlust.models.review import Review

__all__ = ["Listing", "Review"]
