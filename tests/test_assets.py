from __future__ import annotations

from pathlib import Path

from foliosite.assets import AssetResolver, ImageSource, ImageVariants, derive_retina_path, to_webp_path

from conftest import write_image


def test_derive_retina_path() -> None:
    assert derive_retina_path("x-300.jpg") == "x.jpg"
    assert derive_retina_path("book/2025/cover-300.JPEG") == "book/2025/cover.JPEG"
    assert derive_retina_path("book/cover-300.png") == "book/cover.png"
    assert derive_retina_path("book/cover.jpg") is None
    assert derive_retina_path("book/cover-300.gif") is None


def test_to_webp_path() -> None:
    assert to_webp_path("x-300.jpg") == "x-300.webp"
    assert to_webp_path("x.jpeg") == "x.webp"
    assert to_webp_path("x.png") is None


def test_srcset_strings() -> None:
    primary = ImageSource("a-300.jpg")
    variants = ImageVariants(primary=primary, retina=ImageSource("a.jpg"), webp=ImageSource("a-300.webp"))

    assert variants.srcset() == "a-300.jpg 1x, a.jpg 2x"
    assert variants.webp_srcset() == "a-300.webp"
    assert ImageVariants(primary=primary).srcset() is None


def test_image_reads_dimensions_and_caches(tmp_path: Path) -> None:
    write_image(tmp_path / "images" / "logo.png", (40, 20))
    resolver = AssetResolver(tmp_path)

    source = resolver.image("images/logo.png")
    assert source is not None
    assert (source.width, source.height) == (40, 20)
    assert source.size_bytes > 0

    (tmp_path / "images" / "logo.png").unlink()
    assert resolver.image("images/logo.png") == source


def test_svg_and_unreadable_images_have_no_dimensions(tmp_path: Path) -> None:
    (tmp_path / "icon.svg").write_text("<svg xmlns='http://www.w3.org/2000/svg'/>", encoding="utf-8")
    (tmp_path / "broken.jpg").write_bytes(b"not an image")
    resolver = AssetResolver(tmp_path)

    svg = resolver.image("icon.svg")
    broken = resolver.image("broken.jpg")
    assert svg is not None and svg.width is None
    assert broken is not None and broken.height is None


def test_symlink_escaping_root_is_ignored(tmp_path: Path) -> None:
    outside = write_image(tmp_path / "outside" / "secret.jpg")
    root = tmp_path / "site"
    root.mkdir()
    (root / "secret.jpg").symlink_to(outside)

    assert AssetResolver(root).image("secret.jpg") is None


def test_missing_entries_are_recorded_once(tmp_path: Path) -> None:
    resolver = AssetResolver(tmp_path)

    assert resolver.icon("images/missing.png", "certifications[0].icon") is None
    assert resolver.icon("images/missing.png", "certifications[0].icon") is None
    assert resolver.cover_variants("book/missing-300.jpg", "reading[3].cover") is None

    assert resolver.missing == [
        "certifications[0].icon: images/missing.png",
        "reading[3].cover: book/missing-300.jpg",
    ]


def test_unsafe_cover_is_dropped_without_probing(tmp_path: Path) -> None:
    write_image(tmp_path / "secret.jpg")
    resolver = AssetResolver(tmp_path / "covers")

    assert resolver.cover_variants("../secret.jpg", "reading[0].cover") is None
    assert resolver.missing == []
