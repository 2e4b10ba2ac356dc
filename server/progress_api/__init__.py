"""Progress report API package."""
