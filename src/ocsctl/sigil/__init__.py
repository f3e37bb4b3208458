"""
Sigil - the operator's keypair (secp256k1 or ed25519) and payload signing.
"""
