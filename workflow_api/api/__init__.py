"""HTTP layer: Flask blueprints and error handlers for the workflow API."""
