"""Attendance Engine package.

Feature modules (attendance, summary, corrections, leaves, ...) each keep a
domain model, a repository interface with its MySQL implementation, a
service holding the business rules and a thin Flask controller.
"""
