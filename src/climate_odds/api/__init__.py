"""HTTP interface: routers and request/response schemas."""
