"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- applications: Application drafts, stages and question sets
- cycles: Recruitment cycles
- emails: Email logs and bulk sends
- events: Public events, attendance and waitlists
- forms: Generic forms, answers and submissions
- newsletter: Newsletter subscriptions
- newsroom: Newsroom posts, listings and page views
- phases: Review configs, reviews, rankings and cutoffs
- projects: Project showcase
- recruitment_events: Recruitment events and RSVPs
- site_settings: Site settings and maintenance status
- slots: Slots and bookings
- team: Team page members and ordering
- users: Users, roles and the audit log
"""
