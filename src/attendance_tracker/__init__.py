"""Classroom attendance tracker.

Feature modules (users, sessions, attendance) each carry a model, a repository
protocol with a MySQL implementation, a service holding the business rules and
a thin Flask controller.
"""
