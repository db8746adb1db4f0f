"""
Commands - implementations of the Formicarium CLI commands.

- wallet:  create the local wallet; connect / disconnect it
- network: show, list, sync, and switch the selected network
- market:  contract owner, printers, orders, balances
- order:   place print orders and inspect the token approval
"""
