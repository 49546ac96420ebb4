"""Unit tests for the Pinecone vector store provider with a mocked client."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from docsearch.models.documents import UpsertRecord
from docsearch.providers.vector_store.pinecone_provider import PineconeProvider, _is_timeout
from docsearch.utils.errors import ConnectionTimeoutError, VectorStoreError


class ReadTimeoutError(Exception):
    """Stand-in named like urllib3's read timeout."""


@pytest.fixture()
def client() -> MagicMock:
    mock = MagicMock()
    mock.list_indexes.return_value = []
    mock.index = MagicMock()
    mock.Index.return_value = mock.index
    return mock


@pytest.fixture()
def provider(client: MagicMock) -> PineconeProvider:
    return PineconeProvider(api_key="pc-test", region="eu-west-1", client=client)


class TestTimeoutDetection:
    def test_builtin_timeout(self) -> None:
        assert _is_timeout(TimeoutError())

    def test_by_class_name(self) -> None:
        assert _is_timeout(ReadTimeoutError())

    def test_wrapped_cause(self) -> None:
        try:
            try:
                raise ReadTimeoutError("read timed out")
            except ReadTimeoutError as inner:
                raise RuntimeError("max retries exceeded") from inner
        except RuntimeError as outer:
            assert _is_timeout(outer)

    def test_reason_attribute(self) -> None:
        exc = RuntimeError("retry error")
        exc.reason = TimeoutError()  # type: ignore[attr-defined]
        assert _is_timeout(exc)

    def test_other_errors(self) -> None:
        assert not _is_timeout(ValueError("bad request"))


class TestPineconeProvider:
    def test_name_and_availability(self, provider: PineconeProvider) -> None:
        assert provider.get_provider_name() == "pinecone"
        assert provider.is_available() is True

    @pytest.mark.asyncio()
    async def test_creates_serverless_index(
        self, provider: PineconeProvider, client: MagicMock
    ) -> None:
        assert await provider.create_index_if_absent("thundersearch", 1536) is True

        kwargs = client.create_index.call_args.kwargs
        assert kwargs["name"] == "thundersearch"
        assert kwargs["dimension"] == 1536
        assert kwargs["metric"] == "cosine"
        assert kwargs["spec"].region == "eu-west-1"

    @pytest.mark.asyncio()
    async def test_existing_index_is_kept(
        self, provider: PineconeProvider, client: MagicMock
    ) -> None:
        client.list_indexes.return_value = [SimpleNamespace(name="thundersearch")]
        assert await provider.create_index_if_absent("thundersearch", 1536) is False
        client.create_index.assert_not_called()

    @pytest.mark.asyncio()
    async def test_has_vectors(self, provider: PineconeProvider, client: MagicMock) -> None:
        client.index.describe_index_stats.return_value = SimpleNamespace(total_vector_count=0)
        assert await provider.has_vectors("thundersearch") is False
        client.index.describe_index_stats.return_value = SimpleNamespace(total_vector_count=42)
        assert await provider.has_vectors("thundersearch") is True

    @pytest.mark.asyncio()
    async def test_upsert_stores_text_in_metadata(
        self, provider: PineconeProvider, client: MagicMock
    ) -> None:
        client.index.upsert.return_value = SimpleNamespace(upserted_count=1)
        record = UpsertRecord(id="c1", vector=[0.1, 0.2], metadata={"title": "T"}, content="body")

        assert await provider.upsert("thundersearch", [record]) == 1
        client.index.upsert.assert_called_once_with(
            vectors=[{"id": "c1", "values": [0.1, 0.2], "metadata": {"title": "T", "text": "body"}}]
        )

    @pytest.mark.asyncio()
    async def test_upsert_without_reported_count(
        self, provider: PineconeProvider, client: MagicMock
    ) -> None:
        client.index.upsert.return_value = SimpleNamespace()
        records = [UpsertRecord(id=f"c{n}", vector=[0.1]) for n in range(2)]
        assert await provider.upsert("thundersearch", records) == 2

    @pytest.mark.asyncio()
    async def test_query_pops_text(self, provider: PineconeProvider, client: MagicMock) -> None:
        client.index.query.return_value = SimpleNamespace(
            matches=[SimpleNamespace(id="c1", score=0.87, metadata={"title": "T", "text": "body"})]
        )

        matches = await provider.query("thundersearch", [0.1], top_k=3, filters={"category": "AI"})

        assert matches[0].id == "c1"
        assert matches[0].score == pytest.approx(0.87)
        assert matches[0].content == "body"
        assert matches[0].metadata == {"title": "T"}
        client.index.query.assert_called_once_with(
            vector=[0.1], top_k=3, include_metadata=True, filter={"category": "AI"}
        )

    @pytest.mark.asyncio()
    async def test_timeout_maps_to_connection_timeout(
        self, provider: PineconeProvider, client: MagicMock
    ) -> None:
        client.list_indexes.side_effect = ReadTimeoutError("read timed out")
        with pytest.raises(ConnectionTimeoutError):
            await provider.create_index_if_absent("thundersearch", 1536)

    @pytest.mark.asyncio()
    async def test_other_errors_map_to_vector_store_error(
        self, provider: PineconeProvider, client: MagicMock
    ) -> None:
        client.index.upsert.side_effect = RuntimeError("quota exceeded")
        with pytest.raises(VectorStoreError):
            await provider.upsert("thundersearch", [UpsertRecord(id="c1", vector=[0.1])])
