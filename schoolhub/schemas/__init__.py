"""Request bodies for the API routers."""
