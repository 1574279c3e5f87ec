"""Infrastructure layer — project layout, file I/O, content repository, processes.

This layer depends on stdlib and the domain layer. It must never import
from services, commands, or output.
"""
