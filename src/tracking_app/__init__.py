"""TrackingApp backend package.

Feature modules (offices, attendance, requests, workplans, ...) each follow the
same layering: dataclass models, a repository Protocol with a MySQL
implementation, a service holding the use cases and a thin Flask controller.
"""

__version__ = "1.0.0"
