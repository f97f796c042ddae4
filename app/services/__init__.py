"""
Domain services

Pure reconciliation engine (ledger, balance_service, obligation_resolver,
contract_service, payment_validator) and the database-backed services the
routes call (payment_service, rent_service, billing_service,
report_service, auth_service).
"""
