from versescribe.core.exceptions import NotFoundError, ProfileNotFound
from versescribe.core.logging import get_logger
from versescribe.models.records import Profile, ProfileEnsure, ProfileUpdate, ProviderLink
from versescribe.storage.base import Stores

log = get_logger(__name__)


async def get_profile(stores: Stores, user_id: str) -> Profile:
    """Profile with lifetime credits summed from the daily ledger."""
    profile = await stores.profiles.get(user_id)
    if profile is None:
        raise ProfileNotFound()
    earned, spent = await stores.credits.totals(user_id)
    return profile.model_copy(update={"total_credits_earned": earned, "total_credits_spent": spent})


async def ensure_profile(stores: Stores, user_id: str, claims: ProfileEnsure) -> Profile:
    """Called after every login; creates the profile the first time."""
    existed = await stores.profiles.get(user_id) is not None
    await stores.profiles.ensure(user_id, claims)
    log.info("user_login" if existed else "user_created", user_id=user_id, provider=claims.provider)
    return await get_profile(stores, user_id)


async def update_profile(stores: Stores, user_id: str, changes: ProfileUpdate) -> Profile:
    profile = await stores.profiles.update(user_id, changes)
    if profile is None:
        raise ProfileNotFound()
    log.info("profile_updated", user_id=user_id, fields=sorted(changes.model_dump(exclude_none=True)))
    return await get_profile(stores, user_id)


async def get_providers(stores: Stores, user_id: str) -> list[dict]:
    profile = await stores.profiles.get(user_id)
    if profile is None:
        raise ProfileNotFound()
    if not profile.provider:
        return []
    return [
        {
            "id": f"{user_id}-{profile.provider}",
            "provider": profile.provider,
            "email": profile.email,
            "name": profile.display_name,
            "linked_at": profile.provider_linked_at.isoformat() if profile.provider_linked_at else None,
        }
    ]


async def link_provider(stores: Stores, user_id: str, link: ProviderLink) -> Profile:
    profile = await stores.profiles.set_provider(
        user_id,
        link.provider,
        name=link.provider_name,
        email=link.provider_email,
    )
    if profile is None:
        raise ProfileNotFound()
    log.info("provider_linked", user_id=user_id, provider=link.provider)
    return profile


async def unlink_provider(stores: Stores, user_id: str, provider: str) -> None:
    profile = await stores.profiles.get(user_id)
    if profile is None:
        raise ProfileNotFound()
    if profile.provider != provider:
        raise NotFoundError("Provider not linked")
    await stores.profiles.set_provider(user_id, None)
    log.info("provider_unlinked", user_id=user_id, provider=provider)


async def disconnect_all_providers(stores: Stores, user_id: str) -> None:
    if await stores.profiles.set_provider(user_id, None) is None:
        raise ProfileNotFound()
    log.info("providers_disconnected", user_id=user_id)
