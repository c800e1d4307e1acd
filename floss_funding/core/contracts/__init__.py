"""floss_funding.core.contracts

Stable interfaces (ABCs) between floss_funding's feature packages.

Only interfaces and shared type definitions live here.
"""
