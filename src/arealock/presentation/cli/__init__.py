"""Console front end."""
