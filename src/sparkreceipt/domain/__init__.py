"""Domain layer for sparkreceipt: entities, services and derived views.

Services are imported from their modules directly (for example
``from sparkreceipt.domain.invoice import InvoiceService``) so that the
database layer can import entities without pulling the services in.
"""
