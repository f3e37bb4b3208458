"""
Theurgy - command implementations for the ocsctl CLI.

- call: invoke one method with positional arguments
- menu: interactive method menu (prompt per parameter)
- session: lazily loaded interface, keypair and endpoint for a run
- render: operator-facing output for invocation results
"""
