"""HTTP surface of the visit counter service (FastAPI)."""
