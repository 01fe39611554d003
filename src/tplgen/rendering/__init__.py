"""Template rendering and the build driver."""
