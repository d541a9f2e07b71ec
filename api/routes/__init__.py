"""API routers: budget data, chart payloads, and the homepage."""
