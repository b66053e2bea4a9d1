"""Services Layer — async shell around the pure core.

Invariants:
    - The gateway is the only component performing IO
    - Directory and aggregator store failures as state; they never raise taxonomy errors

Design Decisions:
    - One service per component; BankingClient is the composition root
"""
