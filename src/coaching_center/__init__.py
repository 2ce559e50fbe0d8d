"""Coaching Center backend package.

Organized by feature modules (operators, students, billing, notifications,
overdue) with a thin Flask controller layer over service/repository layers.
"""
