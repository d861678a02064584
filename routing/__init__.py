#Marks routing as a package.
#Re-exports the OSRM adapter so other modules import from routing without knowing internal file names.
#No business logic.

from .osrm_client import OSRMClient, OSRMError, OSRMNoMatchError

__all__ = [
    "OSRMClient",
    "OSRMError",
    "OSRMNoMatchError",
]
