"""HTTP API for captionguard."""
