"""HTTP API for the Microblog application."""
