"""
Core - settings, persistence, sessions and shared infrastructure.

Import from the submodules directly, e.g. ``academy.core.auth.require_admin``
or ``academy.core.storage.upload_media``.
"""
