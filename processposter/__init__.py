"""processposter: create and enroll processes in a Capture workflow engine.

Import from the submodules directly (``processposter.gateway``,
``processposter.models.process`` ...). Nothing is imported here so that
``processposter.utils.setup_logging()`` runs before any module logger
is first used.
"""

__version__ = "0.1.0"
