"""In-memory fakes for OAuth domain collaborators."""
