"""Pydantic request/response contracts, one module per resource."""
