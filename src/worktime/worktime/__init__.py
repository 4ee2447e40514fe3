"""WorkTime+ attendance package.

This package is organized by feature modules (attendance, ledger, reports, users)
with a thin Flask controller layer over service/repository layers backed by a
key-value store.
"""
