# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Identity Registry - a signature-authorized ledger of identities.

One logical identity (an EIN) is bound to a set of addresses, a recovery
address, providers and resolvers. Nothing is authorized by sessions: every
mutation carries the signatures it needs, and the recovery and poison-pill
rules keep a compromised key from quietly taking an identity over.

Architecture:
  Signature verification (raw or EIP-191 prefixed secp256k1)
    → Identity store (EINs, address sets, reverse index)
    → Recovery (two-tier recovery address, rate-limited recovery)
    → Poison pill (evicted addresses may wipe the identity)

CLI entry point: ``identity-registry`` (read-only inspection of a snapshot)
"""

__version__ = "1.0.0"

from .identity import IdentityRegistry

__all__ = ["IdentityRegistry", "__version__"]
