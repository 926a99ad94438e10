"""abg-site.

Backend service for a university student organization's website.

Core subpackages
----------------

- ``abg_site.core``:

  - Logging and monitoring setup.
  - Database entities, repositories and the async session layer.
  - Domain enums, role permissions and API I/O models.

- ``abg_site.server``:

  - The FastAPI application, routers and middleware.
  - Services holding the recruitment, ranking, attendance and newsletter rules.

Typical recruitment workflow
----------------------------

1. An admin creates a ``RecruitmentCycle`` and marks it active.
2. Applicants save drafts and submit through the portal.
3. Reviewers score applications per phase.
4. An admin generates the phase ranking and applies a cutoff, which moves
   every applicant to their next stage.
5. Interview slots are booked by applicants who advanced.
"""
