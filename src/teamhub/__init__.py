"""TeamHub — internal team collaboration portal.

The backend behind the team's single-page app: signup and admin approval,
session auth, weekly progress and task check-ins, meetings, the project
showcase, and the shared resource library.
"""

__version__ = "0.1.0"
