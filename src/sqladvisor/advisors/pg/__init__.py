"""Advisors for the Postgres family."""
