"""Lab attendance package.

Feature modules (students, attendance, overtime, achievements, reports)
with a thin Flask controller layer over service/repository layers.
"""
