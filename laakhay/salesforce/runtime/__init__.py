"""Runtime layers: REST transport and query pagination."""
