"""LRN Attendance package.

This package is organized by feature modules (students, attendance,
notifications, reports) with a thin Flask controller layer and
service/repository layers on top of a generic storage gateway.
"""
