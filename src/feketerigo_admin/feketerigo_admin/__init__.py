"""Feketerigó admin backend.

Feature modules (invoices, payroll, attendance, newsletters, ...) each carry a
thin Flask controller over service and repository layers. Remote document
processing goes through the hosted function client in ``platform``.
"""
