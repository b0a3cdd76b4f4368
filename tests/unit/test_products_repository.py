import pytest

from storefront.errors import StoreUnavailable, ValidationError
from storefront.products.images import ImageFile, ImageStore, key_from_url
from storefront.products.repository import ProductRepository


def _repo(supabase):
    return ProductRepository(supabase, ImageStore(supabase, "bucket"), table="products")


def _files(n):
    return [ImageFile(filename=f"img{i}.png", content=b"x", content_type="image/png") for i in range(n)]


def test_key_from_url_takes_last_decoded_segment():
    url = "https://fake.supabase.co/storage/v1/object/public/bucket/my%20mug.png?"
    assert key_from_url(url) == "my mug.png"
    assert key_from_url("https://cdn.example.com/a/b/c.jpg") == "c.jpg"


def test_upload_many_returns_urls_in_order(supabase):
    store = ImageStore(supabase, "bucket")
    urls = store.upload_many(_files(3))
    assert [key_from_url(u) for u in urls] == ["img0.png", "img1.png", "img2.png"]
    assert not any(u.endswith("?") for u in urls)


def test_upload_many_rejects_six_files_before_any_upload(supabase):
    store = ImageStore(supabase, "bucket")
    with pytest.raises(ValidationError):
        store.upload_many(_files(6))
    assert supabase.uploads == []


def test_delete_one_missing_object_is_not_an_error(supabase):
    ImageStore(supabase, "bucket").delete_one("nope.png")
    assert supabase.removals == ["nope.png"]


def test_upsert_assigns_id_and_get_returns_same_record(supabase):
    repo = _repo(supabase)
    stored = repo.upsert({"name": "Mug", "price": 12.5, "images": ["https://x/a.png", "https://x/b.png"]})
    assert stored["id"]
    fetched = repo.get_by_id(stored["id"])
    assert fetched == stored
    assert fetched["images"] == ["https://x/a.png", "https://x/b.png"]


def test_upsert_generates_distinct_ids(supabase):
    repo = _repo(supabase)
    a = repo.upsert({"name": "A"})
    b = repo.upsert({"name": "B"})
    assert a["id"] != b["id"]


def test_upsert_is_idempotent(supabase):
    repo = _repo(supabase)
    product = {"id": "p1", "name": "Mug", "images": []}
    repo.upsert(product)
    repo.upsert(product)
    assert supabase.tables["products"] == [{"id": "p1", "name": "Mug", "images": []}]


def test_upsert_replaces_whole_record(supabase):
    repo = _repo(supabase)
    repo.upsert({"id": "p1", "name": "Mug", "color": "red"})
    repo.upsert({"id": "p1", "name": "Mug v2"})
    assert repo.get_by_id("p1") == {"id": "p1", "name": "Mug v2", "images": []}


def test_get_by_id_absent_returns_none(supabase):
    assert _repo(supabase).get_by_id("missing") is None


def test_delete_cascades_to_images(supabase):
    repo = _repo(supabase)
    urls = repo.images.upload_many(_files(2))
    repo.upsert({"id": "p1", "images": urls})

    result = repo.delete_by_id("p1")

    assert result.deleted_images == ["img0.png", "img1.png"]
    assert result.failed_images == []
    assert supabase.objects["bucket"] == {}
    assert repo.get_by_id("p1") is None


def test_delete_removes_record_even_if_every_image_delete_fails(supabase):
    repo = _repo(supabase)
    repo.upsert({"id": "p1", "images": ["https://x/a.png", "https://x/b.png", "https://x/c.png"]})
    supabase.fail_removals = True

    result = repo.delete_by_id("p1")

    assert supabase.removals == ["a.png", "b.png", "c.png"]
    assert result.partial is True
    assert result.failed_images == ["a.png", "b.png", "c.png"]
    assert repo.get_by_id("p1") is None


def test_delete_unknown_product_is_noop(supabase):
    result = _repo(supabase).delete_by_id("ghost")
    assert result.id == "ghost"
    assert result.failed_images == [] and result.deleted_images == []


def test_store_failure_raises_store_unavailable(supabase):
    supabase.failing_tables.add("products")
    with pytest.raises(StoreUnavailable):
        _repo(supabase).list_all()
