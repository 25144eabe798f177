from fastapi import APIRouter, Depends

from versescribe.deps import get_current_user_id, get_store_bundle
from versescribe.models.records import Profile, ProfileEnsure, ProfileUpdate, ProviderLink
from versescribe.services import users as users_service
from versescribe.storage.base import Stores

router = APIRouter()


def _profile_out(p: Profile) -> dict:
    return {
        "user_id": p.user_id,
        "email": p.email,
        "name": p.display_name,
        "church": p.church,
        "avatar_url": p.avatar_url,
        "provider": p.provider,
        "credits_earned": p.total_credits_earned,
        "credits_spent": p.total_credits_spent,
    }


@router.get("/profile")
async def profile_get(
    user_id: str = Depends(get_current_user_id),
    stores: Stores = Depends(get_store_bundle),
):
    """Profile with lifetime credit totals."""
    profile = await users_service.get_profile(stores, user_id)
    return {"profile": _profile_out(profile)}


@router.put("/profile")
async def profile_ensure(
    body: ProfileEnsure,
    user_id: str = Depends(get_current_user_id),
    stores: Stores = Depends(get_store_bundle),
):
    """Create or refresh the profile after login."""
    profile = await users_service.ensure_profile(stores, user_id, body)
    return {"profile": _profile_out(profile)}


@router.post("/profile")
async def profile_update(
    body: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    stores: Stores = Depends(get_store_bundle),
):
    profile = await users_service.update_profile(stores, user_id, body)
    return {"profile": _profile_out(profile)}


@router.get("/providers")
async def providers_list(
    user_id: str = Depends(get_current_user_id),
    stores: Stores = Depends(get_store_bundle),
):
    return {"providers": await users_service.get_providers(stores, user_id)}


@router.post("/providers/link")
async def provider_link(
    body: ProviderLink,
    user_id: str = Depends(get_current_user_id),
    stores: Stores = Depends(get_store_bundle),
):
    profile = await users_service.link_provider(stores, user_id, body)
    return {"status": "linked", "profile": _profile_out(profile)}


@router.post("/providers/disconnect-all")
async def providers_disconnect_all(
    user_id: str = Depends(get_current_user_id),
    stores: Stores = Depends(get_store_bundle),
):
    await users_service.disconnect_all_providers(stores, user_id)
    return {"status": "all_disconnected"}


@router.delete("/providers/{provider}")
async def provider_unlink(
    provider: str,
    user_id: str = Depends(get_current_user_id),
    stores: Stores = Depends(get_store_bundle),
):
    await users_service.unlink_provider(stores, user_id, provider)
    return {"status": "unlinked"}
