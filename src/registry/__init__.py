"""Registry clients and local repository access."""
