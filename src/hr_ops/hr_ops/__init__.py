"""HR operations portal backend.

The package is organized by feature modules (pto, recruiting, onboarding, ...)
with a thin Flask controller layer on top of service/repository layers and a
small set of scheduled jobs polling the same database.
"""
