"""Mock persistence layer for the slow-travel catalog: saved routes, travel plans and accounts."""
