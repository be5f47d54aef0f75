"""
Stellar (Soroban) bridge for mirroring registry assets on-chain
"""
