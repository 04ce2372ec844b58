"""
Job Portal
REST backend connecting employers and job seekers.

Architecture:
- MongoDB: users, employer/job seeker profiles, jobs, applications
- FastAPI: thin HTTP layer over the services package
- Application lifecycle: pending -> reviewed -> shortlisted -> hired/rejected,
  withdrawable by the applicant until a terminal state
"""

__version__ = "1.0.0"
