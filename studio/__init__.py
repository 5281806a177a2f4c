"""
Photography Studio Back-Office

REST API over the studio's clients, sessions, invoices, staff, products and
marketing leads.
"""

__version__ = "1.0.0"
