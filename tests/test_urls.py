from utils import urls

THUMB = (
    "https://ci.encar.com/carpicture/carpicture03/pic3881/38817035_001.jpg"
    "?impolicy=heightRate&rh=192&cw=320&ch=192&cg=Center"
)


def test_clean_url_strips_query():
    assert urls.clean_url(THUMB) == "https://ci.encar.com/carpicture/carpicture03/pic3881/38817035_001.jpg"


def test_clean_url_without_query_is_unchanged():
    url = "https://ci.encar.com/carpicture/carpicture03/pic3881/38817035_001.jpg"
    assert urls.clean_url(url) == url


def test_clean_url_is_idempotent():
    for url in [THUMB, "a?b?c", "?", "", "https://x/y.jpg?"]:
        cleaned = urls.clean_url(url)
        assert urls.clean_url(cleaned) == cleaned
        assert "?" not in cleaned


def test_to_full_resolution_rewrites_thumbnail_size():
    assert "rh=696&cw=1160&ch=696" in urls.to_full_resolution(THUMB)
    assert "rh=192" not in urls.to_full_resolution(THUMB)


def test_to_full_resolution_is_idempotent():
    once = urls.to_full_resolution(THUMB)
    assert urls.to_full_resolution(once) == once


def test_to_full_resolution_leaves_other_urls_alone():
    url = "https://ci.encar.com/carpicture/carpicture03/pic3881/38817035_001.jpg?impolicy=heightRate"
    assert urls.to_full_resolution(url) == url


def test_is_listing_image():
    assert urls.is_listing_image(THUMB)
    assert not urls.is_listing_image("https://img.encar.com/assets/images/common/trans.gif")
    assert not urls.is_listing_image("https://example.com/carpicture/1_1.jpg")
    assert not urls.is_listing_image("")


def test_filter_listing_images_dedups_in_order():
    a = "https://ci.encar.com/carpicture/a.jpg"
    b = "https://ci.encar.com/carpicture/b.jpg"
    assert urls.filter_listing_images([b, a, b, "https://ci.encar.com/trans.gif", a]) == [b, a]


def test_image_extension_ignores_query():
    assert urls.image_extension(THUMB) == ".jpg"
    assert urls.image_extension("https://ci.encar.com/carpicture/front.png?x=1.gif") == ".png"
    assert urls.image_extension("https://ci.encar.com") == ""


def test_extract_car_id():
    assert urls.extract_car_id("https://fem.encar.com/cars/detail/38817035?pageid=x") == "38817035"
    assert urls.extract_car_id("https://fem.encar.com/cars/list") == "unknown"


def test_is_listing_url():
    assert urls.is_listing_url("https://fem.encar.com/cars/detail/1")
    assert not urls.is_listing_url("https://example.com/cars/detail/1")
    assert not urls.is_listing_url("")
