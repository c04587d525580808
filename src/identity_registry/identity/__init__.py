"""Identity registry: EINs bound to addresses, providers, resolvers and a recovery address.

Every mutation is authorized by signatures rather than session state.

Key concepts:
- **Identity**: An EIN plus its recovery address and three address sets.
- **Permission**: A timestamped secp256k1 signature over a fixed-format hash.
- **Recovery**: A two-tier scheme; a newly installed recovery address must
  wait out ``recovery_timeout`` while the displaced one may still recover.
- **Poison pill**: Addresses evicted by a recovery may wipe the identity
  within ``recovery_timeout`` of that recovery.

Security properties:
- An address belongs to at most one identity.
- Adding an address needs consent from both sides.
- A compromised recovery address cannot silently take over.
"""

from identity_registry.identity.address_set import AddressSet
from identity_registry.identity.models import (
    ActingAs,
    Identity,
    IdentityDetails,
    RecoveredChangeLog,
    RecoveryAddressChangeLog,
    Role,
)
from identity_registry.identity.registry import IdentityRegistry
from identity_registry.identity.signatures import Signature, is_signed, sign_message_hash
from identity_registry.identity.store import (
    IdentityStore,
    InMemoryIdentityStore,
    load_store,
    save_store,
)

__all__ = [
    "ActingAs",
    "AddressSet",
    "Identity",
    "IdentityDetails",
    "IdentityRegistry",
    "IdentityStore",
    "InMemoryIdentityStore",
    "RecoveredChangeLog",
    "RecoveryAddressChangeLog",
    "Role",
    "Signature",
    "is_signed",
    "load_store",
    "save_store",
    "sign_message_hash",
]
