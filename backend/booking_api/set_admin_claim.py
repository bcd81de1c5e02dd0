#!/usr/bin/env python3
"""
Firebase Admin SDK ile kullanıcıya admin custom claim ekler (ya da kaldırır).

    set-admin-claim <user_email> [--revoke]

Claim, Firebase token'larıyla gelen principal'a doğrudan, oturum JWT'lerine ise bir
sonraki girişte yansır.
"""
import asyncio
import sys

from booking_api.config import get_settings, init_firebase_app
from booking_api.schemas.user import UserRecord
from booking_api.services.identity import FirebaseIdentityProvider, IdentityProvider, UserNotFoundError


async def set_admin_claim(identity: IdentityProvider, user_email: str, admin: bool = True) -> UserRecord:
    """Kullanıcıyı email ile bulur ve admin claim'ini ayarlar."""
    user = await identity.get_user_by_email(user_email)
    return await identity.set_admin_claim(user.uid, admin)


def main(argv=None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    revoke = "--revoke" in args
    args = [a for a in args if a != "--revoke"]
    if len(args) != 1:
        print("Usage: set-admin-claim <user_email> [--revoke]")
        print("Example: set-admin-claim owner@example.com")
        return 1

    user_email = args[0]
    settings = get_settings()
    identity = FirebaseIdentityProvider(init_firebase_app(settings))

    try:
        user = asyncio.run(set_admin_claim(identity, user_email, admin=not revoke))
    except UserNotFoundError:
        print(f"User not found: {user_email}")
        return 1

    print(f"Custom claims for {user.email} ({user.uid}): {user.custom_claims}")
    print("The user will need to sign out and sign in again for the changes to take effect.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
