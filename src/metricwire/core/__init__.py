"""Core domain: buffers, sources, registry and the command protocol."""
