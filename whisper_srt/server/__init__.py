"""HTTP API package: FastAPI app, job store, and request/response models."""
