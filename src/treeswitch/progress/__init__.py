"""Checkout progress parsing.

Import from submodules:
- types: CheckoutContextEvent, CheckoutProgressEvent, ProgressEvent, GitProgress
- git_progress: raw git and Git LFS line parsers
- checkout_parser: CheckoutProgressParser
"""
