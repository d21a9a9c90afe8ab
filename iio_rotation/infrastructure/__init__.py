"""Infrastructure adapters: system bus access and observability."""
