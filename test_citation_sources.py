"""
Tests for citation source filtering.
Run with: pytest test_citation_sources.py -v
"""
import pytest

from citation_sources import clean_sources, get_category_sources, matches_allowed


@pytest.mark.parametrize("fragment", ["com", "g", "g2", ".com", "2.com", "capterra"])
def test_domain_fragments_are_rejected(fragment):
    assert clean_sources([fragment], "CRM") == []


def test_allowed_domains_subdomains_and_pages():
    sources = [
        "https://www.g2.com/",
        "reviews.capterra.com",
        "g2.com/categories/crm",
        "notg2.com",
        "reddit.com",
        "example-reviews.com",
        "g2.com",
    ]
    assert clean_sources(sources, "CRM") == [
        "g2.com",
        "reviews.capterra.com",
        "g2.com/categories/crm",
        "reddit.com",
    ]


def test_path_scoped_allow_list():
    assert matches_allowed("shopify.com/blog", "shopify.com/blog")
    assert matches_allowed("shopify.com/blog/seo-tips", "shopify.com/blog")
    assert not matches_allowed("shopify.com", "shopify.com/blog")
    assert not matches_allowed("shopify.com/blogger", "shopify.com/blog")
    assert clean_sources(["shopify.com/blog/seo-tips", "shopify.com/pricing"], "ecommerce") == [
        "shopify.com/blog/seo-tips",
    ]


def test_unknown_category_uses_default_sources():
    assert get_category_sources("gardening tools")[0] == "techcrunch.com"
    assert clean_sources(["g2.com", "wired.com"], "gardening tools") == ["wired.com"]
