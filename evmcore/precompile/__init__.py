"""Standard precompiled contracts (ecrecover, SHA-256, RIPEMD-160, identity, alt_bn128, BLAKE2 F) and their per-fork registry."""

__all__ = ["blake2", "bn128", "error", "hashes", "registry", "secp256k1"]