"""tools — subprocess runner and the docker-compose / docker-machine façades."""
