"""Domain records and errors, independent of FastAPI and storage."""
