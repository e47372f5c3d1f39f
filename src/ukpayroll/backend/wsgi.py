"""WSGI entrypoint for deploying the payroll backend."""

from ukpayroll.backend.app import create_app

# WSGI servers expect a module-level variable named ``application``.
application = create_app()
