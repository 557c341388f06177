"""Routing: ordered route table with anchored pattern matching.

Routes are registered during setup and frozen when the app serves its
first request.
"""
