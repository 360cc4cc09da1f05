"""SIABDUL school attendance package.

Organized by feature modules (students, attendance, reports, notifications, ...)
with a thin Flask controller layer over service/repository layers.
"""
