"""Tests for page listing and block tree fetching."""

import pytest

from notion_diary_exporter.fetchers import (
    ApiFetcher,
    BlockTreeFetchError,
    FetcherError,
    PaginationError
)

from notion_fixtures import FakeNotionClient, make_block, make_page


def make_fetcher(client, page_size=100):
    return ApiFetcher({'advanced': {'page_size': page_size}}, client=client)


class TestBlockTree:
    def test_pre_order_flattening(self):
        client = FakeNotionClient(children={
            'root': [
                make_block('A', 'toggle', 'A', has_children=True),
                make_block('B', 'paragraph', 'B'),
            ],
            'A': [make_block('A1', 'paragraph', 'A1')],
        })

        blocks = make_fetcher(client).fetch_block_tree('root')

        assert [b.id for b in blocks] == ['A', 'A1', 'B']

    def test_deep_nesting(self):
        client = FakeNotionClient(children={
            'root': [
                make_block('A', 'bulleted_list_item', 'A', has_children=True),
                make_block('B', 'bulleted_list_item', 'B', has_children=True),
            ],
            'A': [
                make_block('A1', 'bulleted_list_item', 'A1', has_children=True),
                make_block('A2', 'bulleted_list_item', 'A2'),
            ],
            'A1': [make_block('A1a', 'paragraph', 'A1a')],
            'B': [make_block('B1', 'paragraph', 'B1')],
        })

        blocks = make_fetcher(client).fetch_block_tree('root')

        assert [b.id for b in blocks] == ['A', 'A1', 'A1a', 'A2', 'B', 'B1']

    def test_only_blocks_flagged_with_children_are_expanded(self):
        client = FakeNotionClient(children={
            'root': [make_block('A', 'paragraph', 'A', has_children=False)],
            'A': [make_block('ghost', 'paragraph', 'never listed')],
        })

        blocks = make_fetcher(client).fetch_block_tree('root')

        assert [b.id for b in blocks] == ['A']
        assert client.children_calls('A') == []

    def test_pagination_is_exhausted_in_order(self):
        children = [make_block(f'b{i}', 'paragraph', str(i)) for i in range(6)]
        client = FakeNotionClient(children={'root': children})

        blocks = make_fetcher(client, page_size=2).fetch_block_tree('root')

        assert [b.id for b in blocks] == [f'b{i}' for i in range(6)]
        assert client.children_calls('root') == [
            ('children', 'root', None),
            ('children', 'root', '2'),
            ('children', 'root', '4'),
        ]

    def test_child_listings_are_paginated_too(self):
        client = FakeNotionClient(children={
            'root': [
                make_block('A', 'toggle', 'A', has_children=True),
                make_block('B', 'paragraph', 'B'),
            ],
            'A': [make_block(f'A{i}', 'paragraph', str(i)) for i in range(5)],
        })

        blocks = make_fetcher(client, page_size=2).fetch_block_tree('root')

        assert [b.id for b in blocks] == ['A', 'A0', 'A1', 'A2', 'A3', 'A4', 'B']
        assert len(client.children_calls('A')) == 3

    def test_empty_page(self):
        client = FakeNotionClient()
        assert make_fetcher(client).fetch_block_tree('root') == []

    def test_failure_anywhere_aborts_the_tree(self):
        client = FakeNotionClient(
            children={
                'root': [
                    make_block('A', 'toggle', 'A', has_children=True),
                    make_block('B', 'paragraph', 'B'),
                ],
            },
            failing_ids={'A'}
        )

        with pytest.raises(BlockTreeFetchError) as excinfo:
            make_fetcher(client).fetch_block_tree('root')

        assert excinfo.value.root_id == 'root'
        assert isinstance(excinfo.value, FetcherError)

    def test_has_more_without_cursor_is_an_error(self):
        class BrokenClient(FakeNotionClient):
            def list_block_children(self, block_id, start_cursor=None, page_size=100):
                return {'results': [make_block('b', 'paragraph', 'x')], 'has_more': True, 'next_cursor': None}

        with pytest.raises(BlockTreeFetchError):
            make_fetcher(BrokenClient()).fetch_block_tree('root')


class TestFetchPages:
    def test_filter_and_sort_are_sent(self):
        client = FakeNotionClient(pages=[make_page('p1', '3行日記 5/1', '2024-05-01')])

        pages = make_fetcher(client).fetch_pages('db', 'タイトル', '日付', '3行日記')

        assert [p.id for p in pages] == ['p1']
        assert client.queries[0]['filter'] == {'property': 'タイトル', 'title': {'contains': '3行日記'}}
        assert client.queries[0]['sorts'] == [{'property': '日付', 'direction': 'ascending'}]

    def test_full_export_sends_no_filter(self):
        client = FakeNotionClient(pages=[make_page('p1', 'x', '2024-05-01')])

        make_fetcher(client).fetch_pages('db', 'タイトル', '日付', None)

        assert client.queries[0]['filter'] is None

    def test_listing_completes_across_pages(self):
        client = FakeNotionClient(pages=[make_page(f'p{i}', f't{i}', '2024-05-01') for i in range(5)])

        pages = make_fetcher(client, page_size=2).fetch_pages('db', 'タイトル', '日付')

        assert [p.id for p in pages] == ['p0', 'p1', 'p2', 'p3', 'p4']
        assert [call[2] for call in client.calls] == [None, '2', '4']

    def test_query_failure_raises_fetcher_error(self):
        class FailingClient(FakeNotionClient):
            def query_database(self, *args, **kwargs):
                import requests
                raise requests.exceptions.ConnectionError("connection refused")

        with pytest.raises(FetcherError):
            make_fetcher(FailingClient()).fetch_pages('db', 'タイトル', '日付')

    def test_malformed_response(self):
        class MalformedClient(FakeNotionClient):
            def query_database(self, *args, **kwargs):
                return {'object': 'error'}

        with pytest.raises(PaginationError):
            make_fetcher(MalformedClient()).fetch_pages('db', 'タイトル', '日付')


def test_page_size_out_of_range_is_rejected():
    with pytest.raises(ValueError):
        make_fetcher(FakeNotionClient(), page_size=101)
