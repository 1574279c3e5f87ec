"""Service layer — operations the CLI (or a GUI) calls.

Every public method returns a :class:`~sitectl.services.result.ServiceResult`.
"""
