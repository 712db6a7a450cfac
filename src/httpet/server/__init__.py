"""ASGI plumbing: request handling, response sending, error pages, serving."""
