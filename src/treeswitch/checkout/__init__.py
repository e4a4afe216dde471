"""Branch and path checkout.

Import from submodules:
- args: build_checkout_args, build_checkout_paths_args
- types: result and error types
- orchestrator: checkout_branch, stream_checkout_branch, checkout_paths
- cascade: run_submodule_cascade_if_enabled
"""
