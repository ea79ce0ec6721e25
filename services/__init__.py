"""Domain services called by the API routers."""
