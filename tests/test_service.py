"""Tests for the link service."""

from unittest.mock import AsyncMock

import pytest

from shortlinks.errors import (
    ExhaustedError,
    InvalidLinkError,
    LinkNotFoundError,
    StoreUnavailable,
)
from shortlinks.service import LinkService


class TestLinkService:
    """Test link creation and listing."""

    @pytest.mark.asyncio
    async def test_create_link(self, service, sample_urls):
        link = await service.create_link("1", sample_urls[0])

        assert len(link.short_code) == 6
        assert link.original_url == sample_urls[0]
        assert link.owner_id == "1"
        assert link.click_count == 0

    @pytest.mark.asyncio
    async def test_numeric_owner_id_is_stored_as_text(self, service, sample_urls):
        link = await service.create_link(1, sample_urls[0])

        assert link.owner_id == "1"
        assert [l.id for l in await service.list_links("1")] == [link.id]

    @pytest.mark.asyncio
    async def test_collision_is_retried_with_new_code(
        self, store, scripted_generator, logger, sample_urls
    ):
        """A repeated candidate is retried instead of failing the call."""
        generator = scripted_generator(["ab12cd", "ab12cd", "xy34zw"])
        service = LinkService(store=store, generator=generator, logger=logger)

        first = await service.create_link("1", sample_urls[0])
        second = await service.create_link("1", sample_urls[1])

        assert first.short_code == "ab12cd"
        assert second.short_code == "xy34zw"
        assert generator.calls == 3
        assert (await store.find_by_code("ab12cd")).original_url == sample_urls[0]
        assert (await store.find_by_code("xy34zw")).original_url == sample_urls[1]

    @pytest.mark.asyncio
    async def test_exhausted_after_max_attempts(
        self, store, scripted_generator, logger, sample_urls
    ):
        generator = scripted_generator(["taken1"] * 4)
        service = LinkService(store=store, generator=generator, logger=logger, max_attempts=3)
        await store.insert(sample_urls[0], "taken1", "1")

        with pytest.raises(ExhaustedError) as exc_info:
            await service.create_link("1", sample_urls[1])

        assert exc_info.value.attempts == 3
        assert generator.calls == 3
        assert await store.list_by_owner("1") == [await store.find_by_code("taken1")]

    @pytest.mark.asyncio
    async def test_invalid_url(self, service):
        with pytest.raises(InvalidLinkError, match="Invalid URL"):
            await service.create_link("1", "not-a-url")

    @pytest.mark.asyncio
    async def test_invalid_url_is_a_value_error(self, service):
        with pytest.raises(ValueError):
            await service.create_link("1", "ftp://example.com/file")

    @pytest.mark.asyncio
    async def test_missing_owner(self, service, sample_urls):
        with pytest.raises(InvalidLinkError):
            await service.create_link("", sample_urls[0])

    @pytest.mark.asyncio
    async def test_list_links_only_returns_own_links(self, service, sample_urls):
        mine = [await service.create_link("1", url) for url in sample_urls]
        await service.create_link("2", "https://other.example.com")

        links = await service.list_links("1")

        assert [link.short_code for link in links] == [link.short_code for link in mine]
        assert all(link.owner_id == "1" for link in links)
        assert len(await service.list_links("2")) == 1
        assert await service.list_links("3") == []

    @pytest.mark.asyncio
    async def test_get_link(self, service, sample_urls):
        created = await service.create_link("1", sample_urls[0])

        link = await service.get_link(created.short_code)

        assert link.id == created.id
        assert link.click_count == 0

    @pytest.mark.asyncio
    async def test_get_missing_link(self, service):
        with pytest.raises(LinkNotFoundError):
            await service.get_link("zzzzzz")

    @pytest.mark.asyncio
    async def test_store_unavailable_is_retried(self, store, logger, sample_urls):
        real_insert = store.insert
        calls = []

        async def insert(*args):
            calls.append(args)
            if len(calls) == 1:
                raise StoreUnavailable("down")
            return await real_insert(*args)

        store.insert = insert
        service = LinkService(store=store, logger=logger, store_retries=3)

        link = await service.create_link("1", sample_urls[0])

        assert len(calls) == 2
        assert (await store.find_by_code(link.short_code)).id == link.id

    @pytest.mark.asyncio
    async def test_store_unavailable_surfaces_after_retries(self, logger, sample_urls):
        store = AsyncMock()
        store.insert.side_effect = StoreUnavailable("down")
        service = LinkService(store=store, logger=logger, store_retries=3)

        with pytest.raises(StoreUnavailable):
            await service.create_link("1", sample_urls[0])

        assert store.insert.await_count == 3

    @pytest.mark.asyncio
    async def test_list_retries_store_unavailable(self, logger):
        store = AsyncMock()
        store.list_by_owner.side_effect = [StoreUnavailable("down"), []]
        service = LinkService(store=store, logger=logger, store_retries=2)

        assert await service.list_links("1") == []
        assert store.list_by_owner.await_count == 2

    @pytest.mark.asyncio
    async def test_new_links_warm_the_cache(self, store, logger, sample_urls):
        cache = AsyncMock()
        service = LinkService(store=store, cache=cache, logger=logger)

        link = await service.create_link("1", sample_urls[0])

        cache.set_link.assert_awaited_once_with(link.short_code, link.id, sample_urls[0])

    @pytest.mark.asyncio
    async def test_health_check(self, service):
        health = await service.health_check()

        assert health == {"database": True, "cache": True, "overall": True}
