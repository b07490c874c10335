"""Infrastructure layer: storage backends and the HTTP service."""
