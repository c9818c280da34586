"""Version lookup engine: models, ordering, fan-out, aggregation and conflicts."""
