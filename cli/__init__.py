"""Command-line tool that builds a servable project from a WebGL build."""
