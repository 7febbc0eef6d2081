"""Tests for listing and category queries"""
import pytest

from bizhub.errors import ERROR_LOADING_BUSINESSES, RemoteCallError

from .conftest import OWNER_ID, STRANGER_ID, api_error


@pytest.mark.asyncio
async def test_featured_businesses_are_approved_only(database):
    businesses = await database.catalog.featured_businesses()

    assert {b.id for b in businesses} == {"biz-1", "biz-3"}
    assert all(b.status == "approved" for b in businesses)


@pytest.mark.asyncio
async def test_featured_businesses_limit(database, fake_supabase):
    fake_supabase.tables["businesses"] = [
        {"id": f"biz-{i}", "name": f"Shop {i}", "status": "approved"} for i in range(10)
    ]

    businesses = await database.catalog.featured_businesses()

    assert len(businesses) == 6


@pytest.mark.asyncio
async def test_featured_businesses_failure(database, fake_supabase):
    fake_supabase.failures[("businesses", "select")] = api_error()

    with pytest.raises(RemoteCallError) as exc:
        await database.catalog.featured_businesses()

    assert exc.value.message == ERROR_LOADING_BUSINESSES


@pytest.mark.asyncio
async def test_categories_in_display_order(database, fake_supabase):
    fake_supabase.tables["categories"] += [
        {"id": f"cat-{i}", "name": f"Extra {i}", "order": 10 + i} for i in range(10)
    ]

    categories = await database.catalog.list_categories()

    assert len(categories) == 8
    assert [c.id for c in categories[:2]] == ["cat-services", "cat-food"]


@pytest.mark.asyncio
async def test_browse_by_category(database):
    category, businesses = await database.catalog.browse("cat-services")

    assert category.name == "Services"
    # biz-2 is in the category but not approved
    assert [b.id for b in businesses] == ["biz-3"]


@pytest.mark.asyncio
async def test_business_detail_lists_active_products(database, fake_supabase):
    fake_supabase.tables["products"].append(
        {"id": "prod-hidden", "business_id": "biz-1", "name": "Off menu", "is_active": False}
    )

    detail = await database.catalog.business_detail("biz-1")

    assert detail.business.name == "Spice Route Kitchen"
    assert [p.id for p in detail.products] == ["prod-1"]


@pytest.mark.asyncio
async def test_business_detail_unknown(database):
    assert await database.catalog.business_detail("nope") is None


@pytest.mark.asyncio
async def test_owned_businesses_include_pending(database):
    businesses = await database.catalog.owned_businesses(OWNER_ID)

    assert {b.id for b in businesses} == {"biz-1", "biz-2"}


@pytest.mark.asyncio
async def test_display_name_falls_back(database, fake_supabase, owner_session, stranger_session):
    assert await database.users.display_name(owner_session) == "Olivia"
    # Row exists but has no name
    assert await database.users.display_name(stranger_session) == "User"

    fake_supabase.failures[("users", "select")] = api_error()
    assert await database.users.display_name(owner_session) == "User"


@pytest.mark.asyncio
async def test_business_detail_hides_unapproved_listing(database):
    assert await database.catalog.business_detail("biz-2") is None
    assert await database.catalog.business_detail("biz-2", viewer_id=STRANGER_ID) is None


@pytest.mark.asyncio
async def test_business_detail_previews_pending_listing_for_owner(database):
    detail = await database.catalog.business_detail("biz-2", viewer_id=OWNER_ID)

    assert detail.business.status == "pending"


@pytest.mark.asyncio
async def test_null_names_do_not_break_listings(database, fake_supabase):
    fake_supabase.tables["businesses"][0]["name"] = None
    fake_supabase.tables["categories"][0]["name"] = None

    businesses = await database.catalog.featured_businesses()
    categories = await database.catalog.list_categories()

    assert "" in {b.name for b in businesses}
    assert "" in {c.name for c in categories}
